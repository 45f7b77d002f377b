from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo

from storefront.domain.errors import ValidationError
from storefront.domain.models import PopularCustomer, PopularProduct, User

log = logging.getLogger("storefront.manager")

TOP_LIMIT = 5


class ReportingService:
    def __init__(self, repo, auth):
        self.repo = repo
        self.auth = auth

    def popular_products(self, manager: User, limit: int = TOP_LIMIT) -> list[PopularProduct]:
        return self.repo.popular_products(manager.id, limit)

    def popular_customers(self, manager: User, limit: int = TOP_LIMIT) -> list[PopularCustomer]:
        """Customers with the FEWEST orders first."""
        return self.repo.popular_customers(manager.id, limit)

    def export_store_report_excel(self, manager: User, path: str | Path) -> Path:
        self.auth.managed_stores(manager)
        wb = Workbook()

        def bold_row(ws, r):
            for c in ws[r]:
                c.font = Font(bold=True)

        def set_widths(ws, widths: dict[str, int]):
            for col, w in widths.items():
                ws.column_dimensions[col].width = w

        def add_table(ws, name: str, end_col: int):
            if ws.max_row < 2:
                return
            ref = f"A1:{get_column_letter(end_col)}{ws.max_row}"
            tab = Table(displayName=name, ref=ref)
            tab.tableStyleInfo = TableStyleInfo(
                name="TableStyleMedium9",
                showRowStripes=True,
                showColumnStripes=False,
            )
            ws.add_table(tab)

        # -------- 1) Summary --------
        ws = wb.active
        ws.title = "Summary"
        ws.append(["Store ID", "Name", "Products", "Orders", "Units Ordered"])
        bold_row(ws, 1)
        for row in self.repo.store_summary(manager.id):
            ws.append(list(row))
        set_widths(ws, {"A": 10, "B": 28, "C": 10, "D": 10, "E": 14})
        add_table(ws, "StoreSummary", 5)

        # -------- 2) Recent Orders --------
        ws2 = wb.create_sheet("Recent Orders")
        ws2.append(["Order #", "Customer ID", "Store ID", "Product", "Units", "Order Time"])
        bold_row(ws2, 1)
        for o in self.repo.recent_orders_for_manager(manager.id):
            ws2.append([o.number, o.customer_id, o.store_id, o.product_name, o.units, o.ordered_at])
        ws2.freeze_panes = "A2"
        set_widths(ws2, {"A": 10, "B": 12, "C": 10, "D": 28, "E": 8, "F": 22})
        add_table(ws2, "RecentOrders", 6)

        # -------- 3) Popular Products --------
        ws3 = wb.create_sheet("Popular Products")
        ws3.append(["Product", "Orders"])
        bold_row(ws3, 1)
        for p in self.popular_products(manager):
            ws3.append([p.product_name, p.order_count])
        set_widths(ws3, {"A": 28, "B": 10})
        add_table(ws3, "PopularProducts", 2)

        # -------- 4) Popular Customers --------
        ws4 = wb.create_sheet("Popular Customers")
        ws4.append(["User ID", "Name", "Latitude", "Longitude", "Orders"])
        bold_row(ws4, 1)
        for c in self.popular_customers(manager):
            ws4.append([c.user_id, c.name, c.latitude, c.longitude, c.order_count])
        set_widths(ws4, {"A": 10, "B": 28, "C": 10, "D": 10, "E": 10})
        add_table(ws4, "PopularCustomers", 5)

        # -------- 5) Recent Updates --------
        ws5 = wb.create_sheet("Recent Updates")
        ws5.append(["Update #", "Store ID", "Product", "Updated On"])
        bold_row(ws5, 1)
        for u in self.repo.recent_product_updates(manager.id, 50):
            ws5.append([u.number, u.store_id, u.product_name, u.updated_on])
        set_widths(ws5, {"A": 10, "B": 10, "C": 28, "D": 22})
        add_table(ws5, "RecentUpdates", 4)

        ws["G1"] = "Generated"
        ws["H1"] = datetime.now().replace(microsecond=0).isoformat(sep=" ")

        out = Path(path)
        try:
            wb.save(out)
        except OSError as exc:
            raise ValidationError(f"Could not write report to {out}: {exc}") from exc
        log.info("store_report_exported manager=%s path=%s", manager.id, out)
        return out
