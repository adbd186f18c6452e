import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import date

import pandas as pd
import plotly.express as px
import streamlit as st

from kakebo.domain import Category, EducationalState, RecordClass
from kakebo.exceptions import KakeboError
from kakebo.lazy import lazy_top_categories
from kakebo.logger import configure_logging, get_logger
from kakebo.services import FinanceService
from kakebo.settings import Settings
from kakebo.store import LedgerStore
from kakebo.transforms import records_to_df, weekly_report_df
from kakebo.weeks import first_day, last_day, month_key, parse_month

st.set_page_config(page_title="Kakebo", layout="wide")

settings = Settings.load()
configure_logging(settings.log_level, settings.log_file)
logger = get_logger("app")


def money(value) -> str:
    if value is None or pd.isna(value):
        value = 0
    return f"{settings.currency_symbol} {value:,.2f}"


def format_message(message) -> tuple:
    if message.state is EducationalState.FIRST_RECORD:
        return "Good start!", "Logging your first item is the most important step to organize the month."
    if message.state is EducationalState.GOAL_NEAR:
        return "Almost there!", f"You are close to your savings goal of {money(message.goal_value)}. Keep going!"
    return "Goal reached!", f"You reached (or passed) your savings goal of {money(message.goal_value)}."


if "service" not in st.session_state:
    if os.path.exists(settings.seed_path):
        store = LedgerStore.from_seed(settings.seed_path)
    else:
        logger.warning("Seed file %s not found, starting empty", settings.seed_path)
        store = LedgerStore()
    st.session_state.service = FinanceService(store, today=settings.test_date, seed_path=settings.seed_path)
    st.session_state.message_dismissed = set()

service: FinanceService = st.session_state.service

# --- Sidebar: month navigation and test date ---
st.sidebar.markdown("### 📅 Month")
prev_col, next_col = st.sidebar.columns(2)
if prev_col.button("◀ Prev", use_container_width=True):
    service.navigate_month("prev")
if next_col.button("Next ▶", use_container_width=True):
    service.navigate_month("next")

year, num = parse_month(service.month)
picked = st.sidebar.date_input("Jump to month", value=date(year, num, 1), key="month_picker")
if picked and month_key(picked) != service.month and st.sidebar.button("Go"):
    service.select_month(month_key(picked))

st.sidebar.markdown("### 🧪 Test date")
test_date = st.sidebar.date_input("Today is", value=service.today, key="test_date_input")
t1, t2 = st.sidebar.columns(2)
if t1.button("Apply", use_container_width=True):
    service.set_test_date(test_date)
if t2.button("Reset", use_container_width=True):
    service.set_test_date(None)

menu = st.sidebar.radio("Menu", ["🏠 Dashboard", "🧾 Records", "🎯 Goal"])

snap = service.dashboard
st.title(f"Kakebo · {first_day(service.month).strftime('%B %Y')}")
if service.is_past_month:
    st.caption("Past month: the allowance is projected from its last day.")
elif service.is_future_month:
    st.caption("Future month: the allowance is projected from its first day.")

message = service.educational_message
message_key = (service.month, message.state.value) if message else None
if message and message_key not in st.session_state.message_dismissed:
    title, body = format_message(message)
    st.info(f"**{title}** {body}")
    if st.button("Dismiss"):
        st.session_state.message_dismissed.add(message_key)
        st.rerun()

if menu == "🏠 Dashboard":
    k1, k2, k3, k4 = st.columns(4)
    with k1:
        st.metric("Income", money(snap.total_income))
    with k2:
        st.metric("Fixed expenses", money(snap.total_fixed_expenses))
    with k3:
        st.metric("Variable spent", money(snap.total_variable_expenses))
    with k4:
        st.metric("Safe to spend this week", money(snap.weekly_allowance),
                  delta=f"{snap.weeks_remaining} week(s) left", delta_color="off")

    k5, k6, k7 = st.columns(3)
    with k5:
        st.metric("Available for variable", money(snap.available_for_variable),
                  delta=f"{snap.available_vs_income_percent:.0f}% of income", delta_color="off")
    with k6:
        st.metric("Left in variable budget", money(snap.remaining_variable_budget))
    with k7:
        st.metric("Saved vs goal", money(snap.goal_comparison.realized_savings),
                  delta=money(snap.goal_comparison.difference))

    if snap.goal_set:
        st.progress(min(snap.goal_progress_percent, 100.0) / 100.0,
                    text=f"Goal progress {snap.goal_progress_percent:.0f}% of {money(snap.goal_comparison.goal)}")
    else:
        st.caption("No savings goal set for this month.")

    st.subheader("📊 Variable expenses by week")
    report = weekly_report_df(snap)
    st.dataframe(report.style.format(money), use_container_width=True)

    chart_df = (
        report.drop(index="Total", columns="Total")
        .reset_index(names="Category")
        .melt(id_vars="Category", var_name="Week", value_name="Amount")
    )
    fig = px.bar(chart_df, x="Week", y="Amount", color="Category", barmode="stack",
                 title="Weekly spending per category", template="plotly_dark")
    st.plotly_chart(fig, use_container_width=True)

    top = list(lazy_top_categories(service.records, k=len(Category)))
    if top:
        fig_pie = px.pie(values=[v for _, v in top], names=[c.label for c, _ in top],
                         title="Category distribution")
        st.plotly_chart(fig_pie, use_container_width=True)

    st.subheader("🗓 Week details")
    for week in snap.weeks:
        with st.expander(f"{week.label} · {money(snap.week_total(week.label))}"):
            spent = service.week_expenses(week)
            if spent:
                st.table(records_to_df(spent)[["date", "name", "category", "value"]]
                         .assign(date=lambda d: d["date"].dt.strftime("%Y-%m-%d"),
                                 value=lambda d: d["value"].map(money)))
            else:
                st.caption("Nothing spent this week.")

elif menu == "🧾 Records":
    default_day = service.today if month_key(service.today) == service.month else first_day(service.month)
    tab_inc, tab_fix, tab_var = st.tabs(["Income", "Fixed expense", "Variable expense"])

    with tab_inc:
        with st.form("income_form", clear_on_submit=True):
            name = st.text_input("Name")
            value = st.number_input("Value", min_value=0.0, step=10.0)
            day = st.date_input("Date", value=default_day)
            if st.form_submit_button("Add income"):
                try:
                    service.add_income(name, value, day)
                    st.success("Item added!")
                except KakeboError as e:
                    st.error(f"Error: {e}")

    with tab_fix:
        with st.form("fixed_form", clear_on_submit=True):
            name = st.text_input("Name")
            value = st.number_input("Value", min_value=0.0, step=10.0)
            day = st.date_input("Date", value=first_day(service.month))
            due = st.date_input("Due date", value=first_day(service.month),
                                min_value=first_day(service.month), max_value=last_day(service.month))
            if st.form_submit_button("Add fixed expense"):
                try:
                    service.add_fixed_expense(name, value, day, due)
                    st.success("Item added!")
                except KakeboError as e:
                    st.error(f"Error: {e}")

    with tab_var:
        with st.form("variable_form", clear_on_submit=True):
            name = st.text_input("Name")
            value = st.number_input("Value", min_value=0.0, step=10.0)
            day = st.date_input("Date", value=default_day)
            category = st.selectbox("Category", list(Category), format_func=lambda c: c.label)
            if st.form_submit_button("Add variable expense"):
                try:
                    service.add_variable_expense(name, value, day, category)
                    st.success("Item added!")
                except KakeboError as e:
                    st.error(f"Error: {e}")

    df = records_to_df(service.records)
    for record_class in RecordClass:
        subset = df[df["record_class"] == record_class.value]
        st.subheader(record_class.value.replace("_", " ").capitalize())
        if subset.empty:
            st.caption("No records.")
            continue
        for row in subset.itertuples():
            c1, c2, c3, c4 = st.columns([2, 3, 2, 1])
            c1.write(row.date.strftime("%Y-%m-%d") if pd.notna(row.date) else "-")
            c2.write(row.name if not row.category else f"{row.name} · {row.category}")
            c3.write(money(row.value))
            if c4.button("🗑", key=f"del_{row.id}"):
                service.delete_record(int(row.id))
                st.rerun()
            if record_class is RecordClass.FIXED_EXPENSE:
                with st.expander(f"✏ Edit {row.name}"):
                    with st.form(f"edit_fixed_{row.id}"):
                        new_name = st.text_input("Name", value=row.name)
                        new_value = st.number_input("Value", min_value=0.0, value=float(row.value), step=10.0)
                        current_due = row.due_date.date() if pd.notna(row.due_date) else first_day(service.month)
                        current_due = min(max(current_due, first_day(service.month)), last_day(service.month))
                        new_due = st.date_input("Due date", value=current_due,
                                                min_value=first_day(service.month), max_value=last_day(service.month))
                        if st.form_submit_button("Save changes"):
                            try:
                                service.update_fixed_expense(int(row.id), name=new_name, value=new_value,
                                                             due_date=new_due.isoformat())
                                st.rerun()
                            except KakeboError as e:
                                st.error(f"Error updating expense: {e}")

    csv = df.to_csv(index=False)
    st.download_button("⬇ Download CSV", csv, file_name=f"records_{service.month}.csv")

elif menu == "🎯 Goal":
    current = service.goal.value if service.goal else 0.0
    with st.form("goal_form"):
        value = st.number_input("Savings goal", min_value=0.0, value=float(current), step=50.0)
        if st.form_submit_button("Save goal"):
            try:
                service.update_goal(value)
                st.success("Savings goal updated!")
            except KakeboError as e:
                st.error(f"Error updating goal: {e}")

    comparison = service.dashboard.goal_comparison
    st.metric("Goal", money(comparison.goal))
    st.metric("Realized savings", money(comparison.realized_savings), delta=money(comparison.difference))
    st.metric("Progress", f"{service.dashboard.goal_progress_percent:.0f}%")
