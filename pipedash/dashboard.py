import streamlit as st
import pandas as pd
from pathlib import Path
import sys

# Ensure project root is importable when running `streamlit run pipedash/dashboard.py`
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SCRIPT_DIR = str(Path(__file__).resolve().parent)
project_root_str = str(PROJECT_ROOT)
if SCRIPT_DIR in sys.path:
    sys.path.remove(SCRIPT_DIR)
if project_root_str in sys.path:
    sys.path.remove(project_root_str)
sys.path.insert(0, project_root_str)

from pipedash.core.enums import DEAL_STAGES, INDUSTRY_GROUPS
from pipedash.core.exceptions import RestoreError
from pipedash.core.logging_config import configure_logging
from pipedash.database.db import get_db_session, init_db
from pipedash.schemas.filters import DateRange, FilterState
from pipedash.services import metrics_service
from pipedash.services.client_leader_service import ClientLeaderService
from pipedash.services.dashboard_repository import DashboardRepository
from pipedash.services.deal_service import DealService
from pipedash.services.export_service import export_deals_csv
from pipedash.services.filter_service import filter_records
from pipedash.services.sample_data import seed_sample_data

configure_logging()
init_db()

st.set_page_config(page_title="Pipedash – Sales Pipeline", layout="wide")

st.title("📊 Pipedash – Sales Pipeline Dashboard")

with get_db_session() as db:
    leaders = ClientLeaderService(db).list_leaders()

    if not leaders:
        st.info("No client leaders yet. Load the demo dataset or restore a backup.")
        if st.button("Load demo data"):
            seed_sample_data(db)
            st.rerun()

    deals = DealService(db).list_deals()

    # Sidebar filters
    st.sidebar.header("Filters")
    selected_groups = st.sidebar.multiselect("Industry groups", list(INDUSTRY_GROUPS))
    leader_names = {leader.name: leader.id for leader in leaders}
    selected_leaders = st.sidebar.multiselect("Client leaders", list(leader_names))
    selected_stages = st.sidebar.multiselect("Stages", DEAL_STAGES)
    date_bounds = st.sidebar.date_input("Created between", value=())
    search_query = st.sidebar.text_input("Search deals")

    start = date_bounds[0].isoformat() if len(date_bounds) > 0 else ""
    end = date_bounds[1].isoformat() if len(date_bounds) > 1 else ""
    filters = FilterState(
        industry_groups=selected_groups,
        client_leader_ids=[leader_names[name] for name in selected_leaders],
        stages=selected_stages,
        date_range=DateRange(start=start, end=end),
        search_query=search_query,
    )
    filtered = filter_records(deals, filters)

    # KPI cards
    metrics = metrics_service.compute_metrics(filtered)
    col1, col2, col3, col4, col5 = st.columns(5)
    col1.metric("Total Revenue", f"${metrics.total_revenue:,.0f}")
    col2.metric("Avg Deal Size", f"${metrics.avg_deal_size:,.0f}")
    col3.metric("Win Rate", f"{metrics.win_rate:.1f}%")
    col4.metric("Pipeline Value", f"${metrics.pipeline_value:,.0f}")
    col5.metric("Deals", metrics.deal_count)

    charts = metrics_service.compute_chart_data(filtered)
    left, right = st.columns(2)
    with left:
        st.subheader("Pipeline Funnel")
        funnel = pd.DataFrame([entry.model_dump() for entry in charts.funnel_data])
        if not funnel.empty:
            st.bar_chart(funnel, x="name", y="value", color="fill")
    with right:
        st.subheader("Revenue by Industry Group")
        revenue = pd.DataFrame([entry.model_dump() for entry in charts.revenue_by_group])
        if revenue.empty:
            st.caption("No revenue in the current selection.")
        else:
            st.bar_chart(revenue, x="name", y="revenue")

    st.subheader("Monthly Trend")
    monthly = pd.DataFrame([point.model_dump() for point in charts.monthly_data])
    monthly["label"] = monthly["month"] + " " + monthly["year"].astype(str)
    st.line_chart(monthly, x="label", y=["deals", "revenue"])

    st.subheader("Client Leaders")
    summaries = pd.DataFrame(
        [summary.model_dump() for summary in metrics_service.leader_summaries(leaders, filtered)]
    )
    if summaries.empty:
        st.caption("No client leaders.")
    else:
        summaries["industry_groups"] = summaries["industry_groups"].apply(", ".join)
        st.dataframe(summaries.drop(columns=["client_leader_id"]), use_container_width=True, hide_index=True)

    # Data management
    st.markdown("---")
    st.subheader("Data")
    export_col, backup_col, restore_col = st.columns(3)
    with export_col:
        st.download_button(
            "⬇️ Export deals (CSV)",
            data=export_deals_csv(filtered, leaders),
            file_name="pipeline_export.csv",
            mime="text/csv",
        )
    with backup_col:
        st.download_button(
            "💾 Download backup (JSON)",
            data=DashboardRepository(db).dump_backup(),
            file_name="dashboard_backup.json",
            mime="application/json",
        )
    with restore_col:
        uploaded = st.file_uploader("Restore backup", type=["json"])
        if uploaded is not None and st.button("♻️ Restore"):
            try:
                restored_leaders, restored_deals = DashboardRepository(db).restore(uploaded.getvalue())
            except RestoreError as exc:
                st.error(f"❌ {exc}")
            else:
                st.success(f"Restored {restored_leaders} client leaders and {restored_deals} deals.")
                st.rerun()
