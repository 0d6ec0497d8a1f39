import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncio
import logging
from datetime import date

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from subtracker import config
from subtracker.aggregator import category_breakdown, day_total, spend_breakdown
from subtracker.async_reports import projected_charges
from subtracker.events import event_bus, BUDGET_ALERT, run_renewal_tick
from subtracker.filters import by_name
from subtracker.lazy import iter_subscriptions, top_categories
from subtracker.lifecycle import apply_due_pauses, pause, resume, schedule_pause
from subtracker.recurrence import month_calendar, months_ahead
from subtracker.services import default_dashboard
from subtracker.transforms import (
    load_snapshot,
    replace_subscription,
    subscriptions_frame,
    update_settings,
    validation_errors,
)

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

st.set_page_config(page_title="Subscription Tracker", layout="wide")

if "subscriptions" not in st.session_state:
    subscriptions, settings = load_snapshot(config.get_data_path())
    st.session_state.subscriptions = subscriptions
    st.session_state.settings = settings
    st.session_state.alerts = []

today = st.sidebar.date_input("Reference date", value=date.today())

# the renewal trigger runs on every read of the dashboard
transitions = run_renewal_tick(st.session_state.subscriptions, today)
if transitions:
    st.session_state.subscriptions = apply_due_pauses(st.session_state.subscriptions, today)
    for change in transitions:
        st.session_state.alerts.append(f"Subscription {change['id']} paused at renewal")

subscriptions = st.session_state.subscriptions
settings = st.session_state.settings
currency = settings.currency

for problem in validation_errors(subscriptions):
    st.sidebar.warning(problem["message"])

report = default_dashboard().overview(subscriptions, settings, today)
totals = report["result"]["totals"]
usage = report["result"]["budget"]

menu = st.sidebar.radio(
    "Menu",
    ["🏠 Overview", "📅 Calendar", "⏭ Upcoming", "📋 All subscriptions", "⚙️ Settings"]
)

if menu == "🏠 Overview":
    k1, k2, k3, k4 = st.columns(4)
    with k1:
        st.metric("Monthly budget", f"{usage.budget:,.2f} {currency}")
    with k2:
        st.metric("Monthly cost", f"{totals.monthly:,.2f} {currency}")
    with k3:
        st.metric("Yearly cost", f"{totals.yearly:,.2f} {currency}")
    with k4:
        st.metric("Weekly cost", f"{totals.weekly:,.2f} {currency}")

    if usage.budget > 0:
        st.progress(min(usage.percent, 100) / 100, text=f"{min(round(usage.percent), 999)}% of budget")
        for alert in event_bus.publish(BUDGET_ALERT, {"monthly": usage.spent, "budget": usage.budget, "currency": currency}):
            if "alert" in alert:
                st.warning(f"⚠️ {alert['alert']}")
    else:
        st.info("No budget set")

    col_bar, col_pie = st.columns(2)
    with col_bar:
        df_spend = pd.DataFrame(spend_breakdown(totals))
        fig_bar = px.bar(
            df_spend,
            x="period",
            y="value",
            labels={"period": "", "value": f"Per month ({currency})"},
            title="Spend by billing period",
            template="plotly_dark"
        )
        st.plotly_chart(fig_bar, use_container_width=True)
    with col_pie:
        df_cat = pd.DataFrame(category_breakdown(totals))
        if not df_cat.empty:
            fig_pie = px.pie(df_cat, values="monthly", names="category", title="Monthly spend by category")
            fig_pie.update_layout(height=350)
            st.plotly_chart(fig_pie, use_container_width=True)
        else:
            st.info("No active subscriptions")

    st.subheader("🏷 Top categories")
    for name, monthly in top_categories(totals, 3):
        st.markdown(f"- **{name}**: {monthly:,.2f} {currency}/month")

    months = months_ahead(today, 12)
    charges = asyncio.run(projected_charges(list(subscriptions), months, today))
    fig_ts = go.Figure()
    fig_ts.add_trace(go.Scatter(
        x=[m.strftime("%b %y") for m in charges],
        y=list(charges.values()),
        mode="lines+markers",
        name="Billed"
    ))
    fig_ts.update_layout(template="plotly_dark", title="Projected charges", margin=dict(t=40, b=10, l=10, r=10))
    st.plotly_chart(fig_ts, use_container_width=True)

    for alert in st.session_state.alerts[-5:]:
        st.caption(alert)

elif menu == "📅 Calendar":
    st.title("📅 Calendar")
    month = st.date_input("Month", value=today.replace(day=1), key="calendar_month")
    calendar_map = month_calendar(subscriptions, month, today)
    if not calendar_map:
        st.info("No payments this month")
    for day, day_subs in calendar_map.items():
        with st.expander(f"{day.strftime('%A %d %B')} · {day_total(day_subs):,.2f} {currency}"):
            for sub in day_subs:
                st.markdown(f"- {sub.name}: {sub.price:,.2f} {currency} ({sub.period})")

elif menu == "⏭ Upcoming":
    st.title("⏭ Upcoming payments")
    rows = [
        {
            "Name": p.subscription.name,
            "Date": p.next_payment_date.isoformat(),
            "In (days)": p.days_until,
            "Price": f"{p.subscription.price:,.2f} {currency}",
            "Scheduled pause": "⏳" if p.subscription.pause_at_renewal else "",
        }
        for p in report["result"]["upcoming"]
    ]
    if rows:
        st.table(pd.DataFrame(rows))
    else:
        st.info("No active subscriptions")

elif menu == "📋 All subscriptions":
    st.title("📋 All subscriptions")
    term = st.text_input("Search")
    matching = tuple(iter_subscriptions(subscriptions, by_name(term)))
    df = subscriptions_frame(matching, today)
    if not df.empty:
        st.dataframe(df.drop(columns=["id"]), use_container_width=True)
        csv = df.to_csv(index=False)
        st.download_button(
            "⬇️ Download CSV",
            csv,
            file_name=f"subscriptions_{today.isoformat()}.csv",
            mime="text/csv"
        )
    else:
        st.info("No subscription found")

    st.subheader("⏯ Status")
    for sub in matching:
        c1, c2, c3 = st.columns([3, 1, 1])
        with c1:
            st.write(f"**{sub.name}** · {sub.status}")
        with c2:
            if sub.status == "active":
                if st.button("Pause", key=f"pause_{sub.id}"):
                    st.session_state.subscriptions = replace_subscription(subscriptions, pause(sub))
                    st.rerun()
            elif st.button("Resume", key=f"resume_{sub.id}"):
                st.session_state.subscriptions = replace_subscription(subscriptions, resume(sub))
                st.rerun()
        with c3:
            if sub.status == "active" and not sub.pause_at_renewal:
                if st.button("Pause at renewal", key=f"schedule_{sub.id}"):
                    st.session_state.subscriptions = replace_subscription(subscriptions, schedule_pause(sub))
                    st.rerun()

elif menu == "⚙️ Settings":
    st.title("⚙️ Settings")
    with st.form("settings_form"):
        budget = st.number_input("Monthly budget", min_value=0.0, value=float(settings.budget), step=5.0)
        new_currency = st.text_input("Currency", value=settings.currency)
        if st.form_submit_button("Save"):
            st.session_state.settings = update_settings(settings, budget=budget, currency=new_currency or currency)
            st.success("Settings saved")
            st.rerun()
