import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncio

import streamlit as st
import pandas as pd
import plotly.graph_objects as go
import plotly.express as px

from cascade.assistant import Assistant
from cascade.budget import (
    BudgetTracker,
    percent_label,
    progress_fraction,
    spent_label,
)
from cascade.config import ConfigurationError, configure_logging, load_settings
from cascade.filters import FILTER_OPTIONS, TransactionLedger
from cascade.forms import TRANSACTION_CATEGORIES, BudgetForm, TransactionForm
from cascade.identity import AuthError, IdentitySession, build_identity
from cascade.overview import AccountOverview
from cascade.profile import ProfileSettings
from cascade.transforms import load_seed


DEEPER_BLUE = "#6A5ACD"
WARNING_RED = "#E0454B"

st.set_page_config(page_title="Cascade", page_icon="💸", layout="centered")


@st.cache_resource
def bootstrap():
    """Settings and logging, set up once per process."""
    secrets = {}
    try:
        secrets = dict(st.secrets)
    except FileNotFoundError:
        pass
    settings = load_settings(secrets=secrets)
    configure_logging(settings.log_level)
    return settings


settings = bootstrap()
if "identity" not in st.session_state:
    try:
        st.session_state.identity = build_identity(settings)
    except ConfigurationError as e:
        st.error(f"Identity provider init failed: {e}")
        st.stop()
identity: IdentitySession = st.session_state.identity

seed = load_seed(settings.seed_path)

if "ledger" not in st.session_state:
    st.session_state.ledger = TransactionLedger(seed.transactions)
if "budget_tracker" not in st.session_state:
    st.session_state.budget_tracker = BudgetTracker(seed.budgets)
if "assistant" not in st.session_state:
    st.session_state.assistant = Assistant(delay=settings.assistant_delay, suggestions=seed.suggestions)
if "overview" not in st.session_state:
    st.session_state.overview = AccountOverview.from_seed(seed.overview)
if "login_mode" not in st.session_state:
    st.session_state.login_mode = True


def run(coro):
    return asyncio.run(coro)


def render_login(session: IdentitySession):
    st.markdown("## Ca💲cade")
    st.caption("Your Financial BFF")

    email = st.text_input("Email", key="login_email")
    password = st.text_input("Password", type="password", key="login_password")
    is_login = st.session_state.login_mode

    if not is_login and st.button("Forgot Password?"):
        try:
            st.info(run(session.reset_password(email)))
        except AuthError as e:
            st.error(e.message)

    if st.button("Log In" if is_login else "Sign Up", type="primary"):
        with st.spinner("Working..."):
            try:
                if is_login:
                    run(session.sign_in(email, password))
                else:
                    run(session.sign_up(email, password))
            except AuthError as e:
                st.error(e.message)
            else:
                st.rerun()

    toggle = "New here? Join the fun!" if is_login else "Already part of the squad? Log in!"
    if st.button(toggle):
        st.session_state.login_mode = not is_login
        st.rerun()


def render_add_transaction():
    with st.form("add_transaction", clear_on_submit=True):
        kind = st.radio("Transaction Type", ["Expense", "Income"], horizontal=True)
        title = st.text_input("Title")
        amount = st.text_input("Amount ($)")
        category = st.selectbox("Category", seed.transaction_categories or TRANSACTION_CATEGORIES)
        date = st.date_input("Date")
        submitted = st.form_submit_button("Save Transaction")
    if submitted:
        form = TransactionForm(title=title, amount=amount, category=category, is_expense=kind == "Expense", date=date)
        result = form.validate()
        if result.is_left():
            st.warning(result.get_error()["message"])
        else:
            form.save()
            st.success("Transaction saved.")


def render_overview(overview: AccountOverview):
    st.metric("Total Balance", overview.balance_label)
    c1, c2 = st.columns(2)
    c1.metric("Income", overview.income_label)
    c2.metric("Spending", overview.spending_label)

    st.subheader("Spending Analysis")
    frame = st.radio("Time Frame", overview.time_frames,
                     index=overview.time_frames.index(overview.selected_time_frame), horizontal=True)
    overview.select_time_frame(frame)

    rows = overview.category_rows()
    fig = px.bar(
        x=[r[2] for r in rows],
        y=[r[0] for r in rows],
        orientation="h",
        text=[r[1] for r in rows],
        labels={"x": "Share", "y": "Category"},
        color_discrete_sequence=[DEEPER_BLUE],
    )
    fig.update_layout(xaxis_range=[0, 1], height=260, margin=dict(l=0, r=0, t=10, b=0))
    st.plotly_chart(fig, use_container_width=True)

    st.subheader("Quick Actions")
    with st.expander("➕ Add Transaction"):
        render_add_transaction()


def render_transactions(ledger: TransactionLedger):
    ledger.search_text = st.text_input("🔍 Search transactions", value=ledger.search_text)
    choice = st.radio("Filter", FILTER_OPTIONS,
                      index=FILTER_OPTIONS.index(ledger.selected_filter.value), horizontal=True)
    ledger.select(choice)

    visible = ledger.visible
    if visible:
        df = pd.DataFrame(
            [{"Title": t.title, "Category": t.category, "Amount": f"${abs(t.amount):.2f}",
              "Type": "Income" if t.is_income else "Expense", "Date": t.date} for t in visible]
        )
        st.dataframe(df, use_container_width=True, hide_index=True)
    else:
        st.info("No transactions match your search.")

    with st.expander("➕ Add Transaction"):
        render_add_transaction()


def render_budget(tracker: BudgetTracker):
    prev_col, label_col, next_col = st.columns([1, 4, 1])
    if prev_col.button("◀", key="prev_month"):
        tracker.previous_month()
    if next_col.button("▶", key="next_month"):
        tracker.next_month()
    label_col.markdown(f"### {tracker.month_label}")

    summary = tracker.summary
    st.write(f"**Total Budget** {summary.total_label}")
    st.progress(progress_fraction(summary.overall_ratio))

    st.subheader("Budget Categories")
    fig = go.Figure(go.Bar(
        x=[progress_fraction(r.ratio) for r in summary.rows],
        y=[r.category.name for r in summary.rows],
        orientation="h",
        marker_color=[WARNING_RED if r.over_threshold else DEEPER_BLUE for r in summary.rows],
        text=[percent_label(r.category) for r in summary.rows],
    ))
    fig.update_layout(xaxis_range=[0, 1], height=320, margin=dict(l=0, r=0, t=10, b=0))
    st.plotly_chart(fig, use_container_width=True)

    if tracker.categories:
        cat = st.selectbox("Category details", tracker.categories, format_func=lambda b: b.name)
        st.caption(f"{spent_label(cat)} ({percent_label(cat)})")

    if summary.flagged:
        st.warning("Close to the limit: " + ", ".join(r.category.name for r in summary.flagged))

    with st.expander("➕ Add Budget Category"):
        with st.form("add_budget", clear_on_submit=True):
            name = st.text_input("Category Name")
            amount = st.text_input("Budget Amount ($)")
            saved = st.form_submit_button("Save")
        if saved:
            form = BudgetForm(category_name=name, amount=amount)
            if form.save() is None:
                st.warning(form.validate().get_error()["message"])


def render_assistant(assistant: Assistant):
    st.markdown("### Financial Assistant")
    st.caption("Ask me anything about your finances!")

    for message in assistant.messages:
        with st.chat_message("user" if message.is_user else "assistant"):
            st.write(message.content)

    cols = st.columns(len(assistant.suggestions) or 1)
    pending = None
    for col, suggestion in zip(cols, assistant.suggestions):
        if col.button(suggestion, key=f"suggest_{suggestion}"):
            pending = suggestion

    typed = st.chat_input("Ask your financial question...")
    pending = pending or typed
    if pending and assistant.submit(pending) is not None:
        with st.chat_message("user"):
            st.write(pending)
        with st.spinner("Typing..."):
            run(assistant.respond())
        st.rerun()


def render_profile(session: IdentitySession):
    if "profile" not in st.session_state:
        st.session_state.profile = ProfileSettings.for_user(session.current_user)
    profile = st.session_state.profile

    st.markdown(f"## 👤 {profile.name}")
    st.caption(profile.email)

    st.subheader("Preferences")
    if st.toggle("🔔 Notifications", value=profile.notifications_enabled) != profile.notifications_enabled:
        st.session_state.profile = profile.toggle_notifications()
    if st.toggle("🌙 Dark Mode", value=profile.dark_mode_enabled) != profile.dark_mode_enabled:
        st.session_state.profile = profile.toggle_dark_mode()

    st.divider()
    confirm = st.checkbox("Are you sure you want to sign out?")
    if st.button("Sign Out", type="primary", disabled=not confirm):
        try:
            run(session.sign_out())
        except AuthError as e:
            st.error(e.message)
        else:
            st.session_state.pop("profile", None)
            st.rerun()


if not identity.is_authenticated:
    render_login(identity)
    st.stop()

try:
    run(identity.refresh())
except AuthError as e:
    st.error(e.message)
if not identity.is_authenticated:
    st.rerun()

tab_overview, tab_tx, tab_budget, tab_ai, tab_profile = st.tabs(
    ["📊 Overview", "📋 Transactions", "💲 Budget", "✨ AI Assistant", "👤 Profile"]
)
with tab_overview:
    render_overview(st.session_state.overview)
with tab_tx:
    render_transactions(st.session_state.ledger)
with tab_budget:
    render_budget(st.session_state.budget_tracker)
with tab_ai:
    render_assistant(st.session_state.assistant)
with tab_profile:
    render_profile(identity)
