"""Entity → response DTO conversion shared by use cases and routes."""

from src.application.dto.responses import (
    DashboardResponse,
    ExpensesReportResponse,
    InventoryReportResponse,
    InventorySummaryResponse,
    LedgerCheckResponse,
    MonthComparisonResponse,
    MonthlyExpenseResponse,
    MovementResponse,
    ProductActivityResponse,
    ProductResponse,
    SupplierResponse,
    TodayCountsResponse,
    VendorResponse,
)
from src.core.entities.movement import Movement, MovementRecord
from src.core.entities.partner import Supplier, Vendor
from src.core.entities.product import Product
from src.core.entities.report import Dashboard, ExpensesReport, InventoryReport
from src.core.services.movement_processor import LedgerCheck


def to_product_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=product.id,  # type: ignore[arg-type]
        sku=product.sku,
        name=product.name,
        description=product.description,
        unit_type=product.unit_type.value,
        unit_label=product.unit_type.label,
        quantity=product.quantity,
        cost_price=product.cost_price,
        min_stock=product.min_stock,
        stock_value=product.stock_value,
        is_low_stock=product.is_low_stock,
        supplier_id=product.supplier_id,
        supplier_name=product.supplier_name,
        is_active=product.is_active,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


def to_movement_response(movement: Movement) -> MovementResponse:
    """Plain movements leave the joined columns empty."""
    response = MovementResponse(
        id=movement.id,  # type: ignore[arg-type]
        product_id=movement.product_id,
        type=movement.type.value,
        quantity=movement.quantity,
        unit_cost=movement.unit_cost,
        total_value=movement.total_value,
        notes=movement.notes,
        vendor_id=movement.vendor_id,
        created_at=movement.created_at,
    )
    if isinstance(movement, MovementRecord):
        response.product_name = movement.product_name
        response.product_sku = movement.product_sku
        response.product_unit_type = (
            movement.product_unit_type.value if movement.product_unit_type else None
        )
        response.vendor_name = movement.vendor_name
    return response


def to_supplier_response(supplier: Supplier) -> SupplierResponse:
    return SupplierResponse(
        id=supplier.id,  # type: ignore[arg-type]
        name=supplier.name,
        contact=supplier.contact,
        phone=supplier.phone,
        email=supplier.email,
        address=supplier.address,
        created_at=supplier.created_at,
    )


def to_vendor_response(vendor: Vendor) -> VendorResponse:
    return VendorResponse(
        id=vendor.id,  # type: ignore[arg-type]
        name=vendor.name,
        phone=vendor.phone,
        created_at=vendor.created_at,
    )


def to_ledger_response(check: LedgerCheck) -> LedgerCheckResponse:
    return LedgerCheckResponse(
        product_id=check.product_id,
        consistent=check.consistent,
        stored_quantity=check.stored_quantity,
        replayed_quantity=check.replayed_quantity,
        stored_cost_price=check.stored_cost_price,
        replayed_cost_price=check.replayed_cost_price,
        entries_replayed=check.entries_replayed,
        quantity_matches=check.quantity_matches,
        cost_matches=check.cost_matches,
    )


def to_inventory_report_response(report: InventoryReport) -> InventoryReportResponse:
    return InventoryReportResponse(
        products=[
            ProductActivityResponse(
                **to_product_response(row.product).model_dump(),
                total_entries=row.total_entries,
                total_exits=row.total_exits,
                total_losses=row.total_losses,
            )
            for row in report.products
        ],
        summary=InventorySummaryResponse(
            total_products=report.summary.total_products,
            total_value=report.summary.total_value,
            low_stock_count=report.summary.low_stock_count,
        ),
    )


def to_expenses_response(report: ExpensesReport) -> ExpensesReportResponse:
    return ExpensesReportResponse(
        months=[
            MonthlyExpenseResponse(
                month=row.month,
                entries_value=row.entries_value,
                exits_value=row.exits_value,
                losses_value=row.losses_value,
            )
            for row in report.months
        ],
        average_entries=report.average_entries,
        average_exits=report.average_exits,
    )


def to_dashboard_response(dashboard: Dashboard) -> DashboardResponse:
    return DashboardResponse(
        total_products=dashboard.total_products,
        stock_value=dashboard.stock_value,
        low_stock_products=[to_product_response(p) for p in dashboard.low_stock_products],
        recent_movements=[to_movement_response(m) for m in dashboard.recent_movements],
        today=TodayCountsResponse(
            entries=dashboard.today.entries,
            exits=dashboard.today.exits,
            losses=dashboard.today.losses,
        ),
        comparison=MonthComparisonResponse(
            this_month=dashboard.comparison.this_month,
            last_month=dashboard.comparison.last_month,
            difference=dashboard.comparison.difference,
            percentage=dashboard.comparison.percentage,
        ),
    )
