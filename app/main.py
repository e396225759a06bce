import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncio
import logging
from datetime import datetime

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from finboard.config import settings
from finboard.controller import DashboardController, DashboardStatus
from finboard.currency import format_amount
from finboard.domain import PeriodSelection
from finboard.services import WidgetService
from finboard.store import SeedStore

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

st.set_page_config(page_title="Dashboard", layout="wide")


def start_controller() -> DashboardController:
    store = SeedStore(settings.SEED_PATH, settings.OWNER_ID, settings.DEFAULT_CURRENCY)
    controller = DashboardController(store)
    asyncio.run(controller.start())
    return controller


if "controller" not in st.session_state:
    with st.spinner("Loading transactions..."):
        st.session_state.controller = start_controller()

controller: DashboardController = st.session_state.controller

while controller.notifications:
    st.toast(controller.notifications.pop(0))

st.title("Dashboard")

if st.sidebar.button("🔄 Reload"):
    controller.teardown()
    del st.session_state["controller"]
    st.rerun()

if controller.state.status is DashboardStatus.EMPTY:
    st.info("No transactions yet. Add some to see your dashboard.")
    st.stop()

ctx = controller.context
symbol = ctx.currency


def money(value) -> str:
    return format_amount(value, symbol)


periods = [p.name.title() for p in PeriodSelection]
chosen = st.radio("Period", periods, index=int(ctx.selected), horizontal=True)
if PeriodSelection[chosen.upper()] is not ctx.selected:
    ctx.set_selected(PeriodSelection[chosen.upper()])
    ctx = controller.context

report = WidgetService().dashboard_report(ctx, datetime.now())
for err in report["errors"]:
    st.warning(f"⚠️ {err['widget']} could not be computed")
res = report["result"]

k1, k2, k3 = st.columns(3)
with k1:
    st.metric("Balance", money(res.get("balance", 0)))
with k2:
    st.metric("Expenses", money(res.get("expenses", 0)))
with k3:
    st.metric("Incomes", money(res.get("incomes", 0)))

summary = res.get("summary", ())
if summary:
    labels = [label for label, _, _ in summary]
    fig_sum = go.Figure()
    fig_sum.add_trace(go.Bar(x=labels, y=[float(i) for _, i, _ in summary], name="Incomes"))
    fig_sum.add_trace(go.Bar(x=labels, y=[float(e) for _, _, e in summary], name="Expenses"))
    fig_sum.update_layout(barmode="group", title="Summary", margin=dict(t=40, b=10, l=10, r=10))
    st.plotly_chart(fig_sum, use_container_width=True)


def breakdown_frame(rows) -> pd.DataFrame:
    return pd.DataFrame(
        [{"Category": cat, "Total": float(total), "Amount": money(total)} for cat, total in rows],
        columns=["Category", "Total", "Amount"],
    )


df_exp = breakdown_frame(res.get("expenses_by_category", ()))
df_inc = breakdown_frame(res.get("incomes_by_category", ()))

t1, t2 = st.columns(2)
with t1:
    st.subheader("Expenses by category")
    st.table(df_exp[["Category", "Amount"]])
with t2:
    st.subheader("Incomes by category")
    st.table(df_inc[["Category", "Amount"]])

p1, p2 = st.columns(2)
with p1:
    if not df_exp.empty:
        st.plotly_chart(px.pie(df_exp, values="Total", names="Category", title="Expenses"), use_container_width=True)
with p2:
    if not df_inc.empty:
        st.plotly_chart(px.pie(df_inc, values="Total", names="Category", title="Incomes"), use_container_width=True)


def series_frame(series) -> pd.DataFrame:
    return pd.DataFrame([{"Period": label, "Amount": float(v)} for label, v in series])


for kind in ("expenses", "incomes"):
    c1, c2 = st.columns(2)
    with c1:
        df_s = series_frame(res.get(f"{kind}_series", ()))
        if not df_s.empty:
            st.plotly_chart(
                px.bar(df_s, x="Period", y="Amount", title=f"{kind.title()} per {res.get('granularity', 'period')}"),
                use_container_width=True,
            )
    with c2:
        df_c = series_frame(res.get(f"{kind}_cumulative", ()))
        if not df_c.empty:
            st.plotly_chart(
                px.line(df_c, x="Period", y="Amount", markers=True, title=f"{kind.title()} evolution"),
                use_container_width=True,
            )

st.subheader("Last transactions")
last = res.get("last_transactions", ())
if last:
    st.table(pd.DataFrame([
        {"Date": t.date, "Category": t.category, "Kind": t.kind.value.title(), "Amount": money(t.amount)}
        for t in last
    ]))
else:
    st.info("No transactions in this period.")
