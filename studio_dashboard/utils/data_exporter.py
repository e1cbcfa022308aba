import csv
import logging
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from io import BytesIO, StringIO
from typing import Any, Dict, List, Optional

import pandas as pd
from fastapi import HTTPException, status
from fastapi.responses import StreamingResponse
from openpyxl.styles import Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from studio_dashboard.schemas.common.pagination import money_to_number
from studio_dashboard.views.filters import get_field

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("csv", "excel")


class DataExportService:
    """CSV and Excel downloads of the list pages ("Xuất báo cáo")"""

    def __init__(self, sum_columns: Optional[List[str]] = None):
        # Display names whose column gets a TOTAL row in Excel
        self.sum_columns = set(sum_columns or [])

    def format_value(self, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, bool):
            return "Có" if value else "Không"
        if isinstance(value, Decimal):
            return money_to_number(value)
        if isinstance(value, datetime):
            return value.strftime("%Y-%m-%d %H:%M:%S")
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, (list, tuple)):
            return ", ".join(str(self.format_value(v)) for v in value)
        if isinstance(value, (str, int, float)):
            return value
        return str(value)

    def prepare_data_for_export(self, data: List[Any], fields_mapping: Dict[str, str]) -> List[Dict[str, Any]]:
        """Prepare data for export by mapping (dotted) fields to display names"""
        exported_data = []
        for item in data:
            row = {}
            for field_key, display_name in fields_mapping.items():
                row[display_name] = self.format_value(get_field(item, field_key))
            exported_data.append(row)
        return exported_data

    def export_to_csv(self, data: List[Dict[str, Any]], filename: str) -> StreamingResponse:
        """Export data to CSV format"""
        try:
            output = StringIO()
            if data:
                writer = csv.DictWriter(output, fieldnames=list(data[0].keys()))
                writer.writeheader()
                writer.writerows(data)
            output.seek(0)
            return StreamingResponse(
                iter([output.getvalue()]),
                media_type="text/csv",
                headers={"Content-Disposition": f"attachment; filename={filename}.csv"}
            )
        except (csv.Error, ValueError) as e:
            logger.error(f"Error exporting to CSV: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to export data to CSV"
            )

    def export_to_excel(self, data: List[Dict[str, Any]], filename: str, sheet_name: str = "Data") -> StreamingResponse:
        """Export data to Excel with a styled header and a TOTAL row for money columns"""
        output = BytesIO()
        try:
            df = pd.DataFrame(data)
            with pd.ExcelWriter(output, engine="openpyxl") as writer:
                df.to_excel(writer, sheet_name=sheet_name, index=False)
                if data:
                    self._style_sheet(writer.sheets[sheet_name], df)
        except (ValueError, TypeError) as e:
            logger.error(f"Error exporting to Excel: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to export data to Excel"
            )
        output.seek(0)
        logger.info(f"📤 Excel export {filename}: {len(data)} rows")
        return StreamingResponse(
            BytesIO(output.read()),
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            headers={"Content-Disposition": f"attachment; filename={filename}.xlsx"}
        )

    def _style_sheet(self, worksheet, df: pd.DataFrame):
        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill("solid", fgColor="366092")
        sum_font = Font(bold=True, size=12)
        sum_fill = PatternFill("solid", fgColor="D9D9D9")
        thin = Side(style="thin")
        border = Border(left=thin, right=thin, top=thin, bottom=thin)

        max_row = len(df) + 1
        max_col = len(df.columns)
        sum_columns = {
            idx: name for idx, name in enumerate(df.columns, 1)
            if name in self.sum_columns and pd.api.types.is_numeric_dtype(df[name])
        }

        for col in range(1, max_col + 1):
            cell = worksheet.cell(row=1, column=col)
            cell.font = header_font
            cell.fill = header_fill
        for row in range(1, max_row + 1):
            for col in range(1, max_col + 1):
                cell = worksheet.cell(row=row, column=col)
                cell.border = border
                if row > 1 and col in sum_columns:
                    cell.number_format = "#,##0"

        if sum_columns:
            sum_row = max_row + 2
            label = worksheet.cell(row=sum_row, column=1, value="TỔNG")
            label.font = sum_font
            label.fill = sum_fill
            for idx, name in sum_columns.items():
                cell = worksheet.cell(row=sum_row, column=idx, value=float(df[name].sum()))
                cell.font = sum_font
                cell.fill = sum_fill
                cell.number_format = "#,##0"
                cell.border = border

        for idx, column in enumerate(worksheet.columns, 1):
            longest = max((len(str(c.value)) for c in column if c.value is not None), default=0)
            worksheet.column_dimensions[get_column_letter(idx)].width = min(max(longest + 2, 10), 50)

    def export(self, items: List[Any], entity: str, export_format: str = "excel") -> StreamingResponse:
        if entity not in EXPORT_FIELD_MAPPINGS:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown export: {entity}")
        if export_format not in EXPORT_FORMATS:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Format must be csv or excel")
        rows = self.prepare_data_for_export(items, EXPORT_FIELD_MAPPINGS[entity])
        filename = f"{entity}_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
        if export_format == "csv":
            return self.export_to_csv(rows, filename)
        return self.export_to_excel(rows, filename, sheet_name=entity)


# Export field mappings for different entities
EXPORT_FIELD_MAPPINGS = {
    "projects": {
        "project_code": "Mã dự án",
        "customer_name": "Khách hàng",
        "customer_phone": "Số điện thoại",
        "package_name": "Gói chụp",
        "package_price": "Giá gói",
        "package_discount": "Giảm giá",
        "shoot_date": "Ngày chụp",
        "shoot_time": "Giờ chụp",
        "location": "Địa điểm",
        "status": "Trạng thái",
        "payment.status": "Thanh toán",
        "payment.deposit": "Đặt cọc",
        "payment.final": "Tổng thanh toán",
    },
    "employees": {
        "name": "Họ tên",
        "role": "Vai trò",
        "phone": "Số điện thoại",
        "email": "Email",
        "skills": "Kỹ năng",
        "base_salary": "Lương cơ bản",
        "start_date": "Ngày bắt đầu",
        "is_active": "Đang làm việc",
    },
    "salaries": {
        "employee_name": "Nhân viên",
        "month": "Tháng",
        "base_salary": "Lương cơ bản",
        "bonus": "Thưởng",
        "deduction": "Khấu trừ",
        "total_amount": "Tổng lương",
        "status": "Trạng thái",
    },
    "transactions": {
        "transaction_date": "Ngày",
        "type": "Loại",
        "category": "Danh mục",
        "description": "Mô tả",
        "amount": "Số tiền",
        "payment_method": "Phương thức",
    },
}

SUM_COLUMNS = ["Giá gói", "Giảm giá", "Đặt cọc", "Tổng thanh toán", "Lương cơ bản",
               "Thưởng", "Khấu trừ", "Tổng lương", "Số tiền"]
