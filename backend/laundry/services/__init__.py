# Services module

from laundry.services.task_service import TaskService, generate_task_id
from laundry.services.inventory_service import InventoryService, stock_status
from laundry.services.equipment_service import EquipmentService, maintenance_status
from laundry.services.cost_allocation_service import CostAllocationService, compute_cost_per_kg
from laundry.services.analytics_service import AnalyticsService
from laundry.services.report_service import ReportService
