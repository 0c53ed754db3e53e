# backend/utils/spreadsheet.py
# Excel exports of the reports page, built with pandas.
import io
from typing import Dict, List

import pandas as pd

from core.reports import ItemSalesRow, LedgerRow, VatSummary

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _workbook(sheets: Dict[str, pd.DataFrame]) -> bytes:
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for name, frame in sheets.items():
            frame.to_excel(writer, sheet_name=name, index=False)
    return buffer.getvalue()


def daily_ledger_xlsx(rows: List[LedgerRow]) -> bytes:
    frame = pd.DataFrame(
        [{
            "Date": r.created_at.strftime("%d/%m/%Y %H:%M"),
            "Order ID": r.order_code,
            "Customer": r.customer_name,
            "Subtotal": f"{r.subtotal:.2f}",
            "VAT": f"{r.vat:.2f}",
            "Total": f"{r.total:.2f}",
            "Payment Method": r.payment_method,
        } for r in rows],
        columns=["Date", "Order ID", "Customer", "Subtotal", "VAT", "Total", "Payment Method"],
    )
    return _workbook({"Daily Sales": frame})


def vat_return_xlsx(summary: VatSummary, rows: List[LedgerRow]) -> bytes:
    summary_frame = pd.DataFrame([
        {"Item": "Total Sales (Inclusive of VAT)", "Amount": f"{summary.total_sales:.2f}"},
        {"Item": "Total VAT Collected", "Amount": f"{summary.total_vat:.2f}"},
        {"Item": "Taxable Sales (Exclusive of VAT)", "Amount": f"{summary.taxable_sales:.2f}"},
        {"Item": "VAT Rate", "Amount": f"{summary.vat_percentage:g}%"},
    ])
    detail_frame = pd.DataFrame(
        [{
            "Order ID": r.order_code,
            "Date": r.created_at.strftime("%d/%m/%Y"),
            "Total Amount": f"{r.total:.2f}",
            "VAT Amount": f"{r.vat:.2f}",
            "Taxable Amount": f"{r.subtotal:.2f}",
        } for r in rows],
        columns=["Order ID", "Date", "Total Amount", "VAT Amount", "Taxable Amount"],
    )
    return _workbook({"VAT Summary": summary_frame, "Transaction Details": detail_frame})


def item_sales_xlsx(rows: List[ItemSalesRow]) -> bytes:
    frame = pd.DataFrame(
        [{
            "Item Name": r.name,
            "Category": r.category,
            "Quantity Sold": r.quantity,
            "Revenue": f"{r.revenue:.2f}",
            "% of Total Sales": f"{r.share_percent:.2f}%",
        } for r in rows],
        columns=["Item Name", "Category", "Quantity Sold", "Revenue", "% of Total Sales"],
    )
    return _workbook({"Item Analysis": frame})
