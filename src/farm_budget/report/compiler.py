"""
Farm Budget Report Compiler

Renders a verified `BudgetSummary` into a paginated PDF using ReportLab:
a title/summary page, one page per enterprise (in input order) and a closing
commentary page chosen by the commentary policy.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, List, Optional
from xml.sax.saxutils import escape

from pydantic import ValidationError
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import (
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from farm_budget.models import (
    BudgetStructureError,
    BudgetSummary,
    CostCategory,
    EnterpriseSummary,
)
from farm_budget.report.commentary import select_commentary
from farm_budget.report.formatting import (
    format_currency,
    format_percent,
    format_quantity,
    format_timestamp,
)

logger = logging.getLogger(__name__)

REPORT_TITLE = "Farm Budget Report"

REPORT_DISCLAIMER = (
    "This report summarises the expected variable costs and income entered for "
    "each enterprise. All figures were recalculated from the submitted inputs "
    "and are estimates only; they do not include fixed or overhead costs and "
    "are not a guarantee of future financial performance."
)

# Summary row labels; `extract.py` reads these back from the first page.
LABEL_GROSS_INCOME = "Total Gross Income"
LABEL_VARIABLE_COSTS = "Total Variable Costs"
LABEL_NET_INCOME = "Total Net Income"
LABEL_PROFIT_MARGIN = "Farm Profit Margin"

PRIMARY_COLOR = colors.HexColor("#2f6b3a")
ROW_SHADE = colors.HexColor("#f3f7f2")


def _as_summary(summary: BudgetSummary | Mapping[str, Any]) -> BudgetSummary:
    """Accept a summary model or mapping; missing derived values become 0."""
    if isinstance(summary, BudgetSummary):
        return summary
    try:
        return BudgetSummary.model_validate(dict(summary))
    except ValidationError as exc:
        raise BudgetStructureError(f"Malformed budget summary: {exc}") from exc


class BudgetReportCompiler:
    """Compiles farm budget summaries to PDF bytes."""

    def __init__(self, author: str = "Farm Budget Service", pagesize=A4):
        self.author = author
        self.pagesize = pagesize
        self._styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        """Set up custom paragraph styles."""
        self._styles.add(ParagraphStyle(
            'ReportTitle',
            parent=self._styles['Title'],
            fontSize=22,
            textColor=PRIMARY_COLOR,
            spaceAfter=12,
        ))

        self._styles.add(ParagraphStyle(
            'FarmLine',
            parent=self._styles['Normal'],
            fontSize=12,
            leading=16,
            alignment=TA_CENTER,
        ))

        self._styles.add(ParagraphStyle(
            'SectionHeading',
            parent=self._styles['Heading2'],
            fontSize=14,
            fontName='Helvetica-Bold',
            spaceBefore=12,
            spaceAfter=8,
            textColor=PRIMARY_COLOR,
        ))

        self._styles.add(ParagraphStyle(
            'Commentary',
            parent=self._styles['Normal'],
            fontSize=11,
            leading=15,
            alignment=TA_JUSTIFY,
            spaceAfter=10,
        ))

        # Small print
        self._styles.add(ParagraphStyle(
            'Disclaimer',
            parent=self._styles['Normal'],
            fontSize=8,
            leading=10,
            textColor=colors.gray,
            alignment=TA_JUSTIFY,
            spaceBefore=16,
        ))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def compile(
        self,
        summary: BudgetSummary | Mapping[str, Any],
        generated_at: Optional[datetime] = None,
    ) -> bytes:
        """
        Compile a budget summary to a PDF document.

        Args:
            summary: Verified `BudgetSummary` (or an equivalent mapping; any
                missing figure is rendered as zero).
            generated_at: Timestamp printed on the title page; defaults to now.

        Returns:
            PDF bytes
        """
        summary = _as_summary(summary)
        generated_at = generated_at or datetime.now()

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=self.pagesize,
            rightMargin=0.75 * inch,
            leftMargin=0.75 * inch,
            topMargin=0.75 * inch,
            bottomMargin=0.9 * inch,
            title=f"{REPORT_TITLE} - {summary.farm_name}",
            author=self.author,
            subject=f"Variable cost budget for {summary.farm_name}",
        )

        story = []
        story.extend(self._build_title_page(summary, generated_at))
        story.append(PageBreak())

        for enterprise in summary.enterprise_summaries:
            story.extend(self._build_enterprise_page(enterprise))
            story.append(PageBreak())

        story.extend(self._build_commentary_page(summary))

        def _footer(canvas_obj, doc_obj):
            canvas_obj.saveState()
            canvas_obj.setFont('Helvetica', 8)
            canvas_obj.setFillColor(colors.gray)
            canvas_obj.drawString(doc_obj.leftMargin, 0.5 * inch, summary.farm_name)
            canvas_obj.drawRightString(
                doc_obj.pagesize[0] - doc_obj.rightMargin,
                0.5 * inch,
                f"Page {doc_obj.page}",
            )
            canvas_obj.restoreState()

        doc.build(story, onFirstPage=_footer, onLaterPages=_footer)

        pdf = buffer.getvalue()
        logger.info(
            "Compiled report for %r: %d enterprises, %d bytes",
            summary.farm_name,
            len(summary.enterprise_summaries),
            len(pdf),
        )
        return pdf

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------
    def _build_title_page(self, summary: BudgetSummary, generated_at: datetime) -> List:
        """Build title block, farm-wide summary and category breakdown."""
        story = []

        story.append(Paragraph(REPORT_TITLE, self._styles['ReportTitle']))
        story.append(Paragraph(f"<b>{escape(summary.farm_name)}</b>", self._styles['FarmLine']))
        story.append(Paragraph(
            f"Production region: {escape(summary.production_region)}",
            self._styles['FarmLine'],
        ))
        story.append(Paragraph(
            f"Generated: {format_timestamp(generated_at)}",
            self._styles['FarmLine'],
        ))
        story.append(Spacer(1, 0.3 * inch))

        totals = summary.farm_totals
        story.append(Paragraph("Farm Summary", self._styles['SectionHeading']))
        story.append(self._create_data_table(
            [
                ["Measure", "Amount"],
                [LABEL_GROSS_INCOME, format_currency(totals.total_gross_income)],
                [LABEL_VARIABLE_COSTS, format_currency(totals.total_variable_costs)],
                [LABEL_NET_INCOME, format_currency(totals.total_net_income)],
                [LABEL_PROFIT_MARGIN, format_percent(totals.farm_profit_margin)],
            ],
            col_widths=[3.2 * inch, 2.5 * inch],
        ))

        story.append(Paragraph("Variable Costs by Category", self._styles['SectionHeading']))
        rows = [["Category", "Amount"]]
        for category in CostCategory:
            rows.append([
                category.label,
                format_currency(summary.aggregated_costs.get(category, 0.0)),
            ])
        rows.append(["All categories", format_currency(sum(summary.aggregated_costs.values()))])
        story.append(self._create_data_table(
            rows,
            col_widths=[3.2 * inch, 2.5 * inch],
            font_size=8,
            total_row=True,
        ))

        story.append(Paragraph(REPORT_DISCLAIMER, self._styles['Disclaimer']))
        return story

    def _build_enterprise_page(self, enterprise: EnterpriseSummary) -> List:
        """Build one enterprise's figures and its cost item detail."""
        story = []
        unit = enterprise.unit_label or "unit"

        story.append(Paragraph(
            f"Enterprise: {escape(enterprise.name or 'Unnamed')}",
            self._styles['SectionHeading'],
        ))
        story.append(self._create_data_table(
            [
                ["Measure", "Value"],
                [enterprise.area_label or "Area", f"{format_quantity(enterprise.area)} {unit}"],
                ["Gross Income", format_currency(enterprise.gross_income)],
                ["Variable Costs", format_currency(enterprise.variable_costs)],
                [f"Variable Costs per {unit}", format_currency(enterprise.costs_per_unit)],
                ["Net Income", format_currency(enterprise.net_income)],
                ["Profit Margin", format_percent(enterprise.profit_margin)],
            ],
            col_widths=[3.2 * inch, 2.5 * inch],
        ))

        story.append(Paragraph("Cost Detail", self._styles['SectionHeading']))
        rows = [["Category", "Item", f"Cost per {unit}", "Total Cost"]]
        labels = {c.value: c.label for c in CostCategory}
        for category_id, items in enterprise.costs.items():
            for item in items:
                rows.append([
                    labels.get(category_id, category_id),
                    item.name or "-",
                    format_currency(item.total),
                    format_currency(item.total * enterprise.area),
                ])

        if len(rows) == 1:
            story.append(Paragraph("No variable costs recorded.", self._styles['Commentary']))
        else:
            story.append(self._create_data_table(
                rows,
                col_widths=[1.7 * inch, 2.3 * inch, 1.3 * inch, 1.3 * inch],
                font_size=8,
            ))
        return story

    def _build_commentary_page(self, summary: BudgetSummary) -> List:
        story = [Paragraph("Commentary", self._styles['SectionHeading'])]
        commentary = select_commentary(summary.farm_totals)
        for paragraph in commentary.paragraphs:
            story.append(Paragraph(escape(paragraph), self._styles['Commentary']))
        return story

    def _create_data_table(
        self,
        data: List[List[str]],
        col_widths: Optional[List[float]] = None,
        font_size: int = 10,
        total_row: bool = False,
    ) -> Table:
        """Create a styled data table with a header row."""
        table = Table(data, colWidths=col_widths)
        style = [
            # Header
            ('BACKGROUND', (0, 0), (-1, 0), PRIMARY_COLOR),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),

            # Data
            ('FONTNAME', (0, 1), (-1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 0), (-1, -1), font_size),
            ('ALIGN', (0, 0), (0, -1), 'LEFT'),
            ('ALIGN', (-1, 1), (-1, -1), 'RIGHT'),
            ('TOPPADDING', (0, 0), (-1, -1), 3),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 3),

            # Grid
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
            ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, ROW_SHADE]),
        ]
        if total_row:
            style.append(('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'))
        table.setStyle(TableStyle(style))
        return table


def compile_report(
    summary: BudgetSummary | Mapping[str, Any],
    generated_at: Optional[datetime] = None,
    author: Optional[str] = None,
) -> bytes:
    """Convenience wrapper around `BudgetReportCompiler.compile`."""
    compiler = BudgetReportCompiler(author=author) if author else BudgetReportCompiler()
    return compiler.compile(summary, generated_at=generated_at)
