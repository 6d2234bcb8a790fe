"""
Service layer

Business rules for orders, labels, users and workstations, plus the
SIRINE specification client.
"""

from label_tracker.services.labels import LabelService
from label_tracker.services.production_orders import (
    PlannedLabel,
    ProductionOrderService,
    calculate_progress,
    compute_rim_breakdown,
    plan_labels,
)
from label_tracker.services.sirine_client import SirineApiClient
from label_tracker.services.users import UserService
from label_tracker.services.workstations import WorkstationService

__all__ = [
    'LabelService',
    'PlannedLabel',
    'ProductionOrderService',
    'calculate_progress',
    'compute_rim_breakdown',
    'plan_labels',
    'SirineApiClient',
    'UserService',
    'WorkstationService',
]
