from __future__ import annotations

import json

import pandas as pd
import streamlit as st
import altair as alt

from farm_budget.aggregate.engine import aggregate
from farm_budget.aggregate.frames import category_frame, enterprise_frame
from farm_budget.config import get_settings
from farm_budget.models import BudgetStructureError
from farm_budget.report.commentary import select_commentary
from farm_budget.report.compiler import compile_report
from farm_budget.report.formatting import format_currency, format_percent

# =====================================================
# Page config
# =====================================================
st.set_page_config(page_title="Farm Budget Preview", layout="wide")
st.title("🌾 Farm Budget Preview")

settings = get_settings()

# =====================================================
# Budget upload
# =====================================================
uploaded = st.file_uploader("Budget JSON", type=["json"])
if uploaded is None:
    st.info("Upload a budget file to preview its verified totals and report.")
    st.stop()

try:
    raw = json.loads(uploaded.getvalue().decode("utf-8"))
    summary = aggregate(raw)
except (json.JSONDecodeError, UnicodeDecodeError) as exc:
    st.error(f"Could not read `{uploaded.name}` as JSON: {exc}")
    st.stop()
except BudgetStructureError as exc:
    st.error(str(exc))
    st.stop()

# =====================================================
# Helpers
# =====================================================
def kpi(label: str, value) -> None:
    """Display a simple KPI metric in the dashboard.

    Args:
        label: Metric label.
        value: Metric value (displayed as-is).
    """
    st.metric(label, value)


def money_columns(df: pd.DataFrame, columns: list[str]) -> pd.DataFrame:
    """Return a copy of `df` with `columns` rendered as currency strings."""
    out = df.copy()
    for col in columns:
        out[col] = out[col].map(format_currency)
    return out

# =====================================================
# SECTION 0 — FARM OVERVIEW
# =====================================================
st.header(f"📌 {summary.farm_name or 'Unnamed farm'}")
st.caption(f"Production region: {summary.production_region or 'N/A'}")

totals = summary.farm_totals
c1, c2, c3, c4 = st.columns(4)
with c1:
    kpi("Gross Income", format_currency(totals.total_gross_income))
with c2:
    kpi("Variable Costs", format_currency(totals.total_variable_costs))
with c3:
    kpi("Net Income", format_currency(totals.total_net_income))
with c4:
    kpi("Profit Margin", format_percent(totals.farm_profit_margin))

st.divider()

# =====================================================
# SECTION 1 — ENTERPRISES
# =====================================================
st.header("🚜 Enterprises")

df_ent = enterprise_frame(summary)
if df_ent.empty:
    st.info("This budget has no enterprises.")
else:
    chart_ent = (
        alt.Chart(df_ent)
        .mark_bar()
        .encode(
            x=alt.X("name:N", sort=alt.SortField("net_income", order="descending"), title=None),
            y=alt.Y("net_income:Q", title="Net Income"),
            tooltip=["name:N", "gross_income:Q", "variable_costs:Q", "net_income:Q"],
        )
        .properties(height=320)
    )
    st.altair_chart(chart_ent, width="stretch")
    st.dataframe(
        money_columns(df_ent, ["gross_income", "variable_costs", "costs_per_unit", "net_income"]),
        width="stretch",
    )

st.divider()

# =====================================================
# SECTION 2 — COSTS BY CATEGORY
# =====================================================
st.header("💸 Variable Costs by Category")

df_cat = category_frame(summary)
df_cat = df_cat[df_cat["amount"] != 0]
if df_cat.empty:
    st.info("No variable costs recorded.")
else:
    chart_cat = (
        alt.Chart(df_cat)
        .mark_bar()
        .encode(
            x=alt.X("label:N", sort=alt.SortField("amount", order="descending"), title=None),
            y=alt.Y("amount:Q", title="Cost"),
            tooltip=["label:N", "amount:Q", "share_pct:Q"],
        )
        .properties(height=320)
    )
    st.altair_chart(chart_cat, width="stretch")

st.divider()

# =====================================================
# SECTION 3 — COMMENTARY & REPORT
# =====================================================
st.header("📝 Commentary")

for paragraph in select_commentary(totals).paragraphs:
    st.write(paragraph)

st.download_button(
    "Download PDF report",
    data=compile_report(summary, author=settings.report_author),
    file_name=f"{uploaded.name.rsplit('.', 1)[0]}.pdf",
    mime="application/pdf",
)

# =====================================================
# Footer
# =====================================================
st.caption("Figures are recalculated from the uploaded inputs • ReportLab • Streamlit")
