from __future__ import annotations

import pandas as pd
import streamlit as st
import altair as alt

from dfp_benchmark.benchmark import Benchmark
from dfp_benchmark.config import get_settings
from dfp_benchmark.db import get_collection
from dfp_benchmark.exceptions import BenchmarkError
from dfp_benchmark.sector.matcher import SectorMatcher
from dfp_benchmark.sector.scoring import SCORERS
from dfp_benchmark.sector.source import YamlSectorSource
from dfp_benchmark.store import MongoAccountStore

# =====================================================
# Page config
# =====================================================
st.set_page_config(page_title="DFP Sector Benchmark", layout="wide")
st.title("📊 DFP Accounts vs Sector Average")

# =====================================================
# Store connection
# =====================================================
try:
    settings = get_settings()
    collection = get_collection(settings)
    # fail fast: ensure the client can reach the server
    collection.database.client.admin.command("ping")
except Exception as exc:  # pragma: no cover - runtime failure handling
    st.error(f"Unable to connect to MongoDB: {exc}")
    st.stop()

store = MongoAccountStore(collection)


# =====================================================
# Helpers
# =====================================================
def center_dataframe(df: pd.DataFrame):
    """Center-align column headers and values for display."""
    return (
        df.style
        .set_properties(**{"text-align": "center"})
        .set_table_styles(
            [{"selector": "th", "props": [("text-align", "center")]}]
        )
        .format(
            {"value": "{:,.0f}", "sector_average": "{:,.0f}", "vs_sector_pct": "{:+.1f}%"},
            na_rep="—",
        )
    )


# =====================================================
# Sidebar — selection
# =====================================================
try:
    companies = store.companies()
    first_year, last_year = store.year_range()
except BenchmarkError as exc:
    st.error(str(exc))
    st.stop()

if not companies:
    st.warning("No companies in the store. Load DFP records first.")
    st.stop()

company = st.sidebar.selectbox("Company", companies)
year = st.sidebar.number_input(
    "Fiscal year", min_value=first_year, max_value=last_year, value=last_year, step=1
)
penultimate = st.sidebar.checkbox("Second-to-last exercise")
scorer_name = st.sidebar.radio("Name matching", sorted(SCORERS), horizontal=True)

bench = Benchmark(
    store,
    SectorMatcher(YamlSectorSource(settings.sectors_file), SCORERS[scorer_name]()),
)

try:
    comparison = bench.compare(company, int(year), penultimate)
except BenchmarkError as exc:
    st.error(f"Comparison failed: {exc}")
    st.stop()

# =====================================================
# SECTION 1 — PEER GROUP
# =====================================================
st.header("🏢 Sector Peers")

if comparison.has_sector_comparison:
    st.write(", ".join(comparison.peers))
else:
    st.info("Sector comparison unavailable for this company and exercise.")

st.divider()

# =====================================================
# SECTION 2 — ACCOUNTS
# =====================================================
st.header("📘 Accounts")

df = comparison.to_frame()

if df.empty:
    st.info("No accounts reported for this company.")
else:
    # top-level accounts only, e.g. 1, 2, 3.01
    df_top = df[df["short_label"].str.count(r"\.") <= 1].dropna(subset=["value"])
    if comparison.has_sector_comparison and not df_top.empty:
        df_plot = df_top.melt(
            id_vars=["short_label", "description"],
            value_vars=["value", "sector_average"],
            var_name="series",
            value_name="amount",
        )
        chart = (
            alt.Chart(df_plot)
            .mark_bar()
            .encode(
                x=alt.X("short_label:N", title="Account"),
                xOffset="series:N",
                y=alt.Y("amount:Q", title="Value"),
                color=alt.Color("series:N", title=None),
                tooltip=["short_label:N", "description:N", "series:N", "amount:Q"],
            )
            .properties(height=320)
        )
        st.altair_chart(chart, width="stretch")

    st.dataframe(center_dataframe(df), width="stretch")

# =====================================================
# Footer
# =====================================================
st.caption("CVM DFP • MongoDB • Dask • Streamlit")
