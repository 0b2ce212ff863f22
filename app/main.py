"""
Streamlit Frontend for Finance Tracker

Pages:
1. Login / Register
2. Dashboard (totals and recent transactions)
3. Add / Edit transaction
4. Reports (charts over a chosen range)
5. Profile (details, password, account deletion)

The logged-in Session lives in st.session_state for this browser tab
only, and is passed to every API call explicitly.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

import streamlit as st
from pydantic import ValidationError

from finance_tracker.client import (
    REPORT_RANGES,
    ApiClientError,
    FinanceApiClient,
    Session,
    parse_amount,
    report_start_date,
)
from finance_tracker.models.transaction import (
    SUGGESTED_CATEGORIES,
    Transaction,
    TransactionDraft,
    TransactionPatch,
)


# Page configuration
st.set_page_config(
    page_title="Finance Tracker",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .income { color: #10B981; font-weight: bold; }
    .expense { color: #EF4444; font-weight: bold; }
</style>
""", unsafe_allow_html=True)

RECENT_LIMIT = 5


@st.cache_resource
def get_client() -> FinanceApiClient:
    """One HTTP client per server process."""
    return FinanceApiClient()


def get_session() -> Optional[Session]:
    return st.session_state.get("session")


def set_session(session: Optional[Session]) -> None:
    st.session_state.session = session


def show_api_error(error: ApiClientError) -> None:
    """Show an API failure; a 401 means the session is gone."""
    if error.is_auth_error:
        set_session(None)
        st.warning("Your session has expired. Please log in again.")
    else:
        st.error(error.message)


def format_money(amount) -> str:
    return f"${Decimal(amount):,.2f}"


def main():
    """Main application entry point."""
    client = get_client()
    session = get_session()

    st.sidebar.title("💰 Finance Tracker")
    st.sidebar.markdown("---")

    if session is None:
        render_auth_page(client)
        return

    st.sidebar.markdown(f"Logged in as **{session.user.name}**")

    pages = ["📊 Dashboard", "➕ Add Transaction", "📈 Reports", "👤 Profile"]
    if st.session_state.get("editing_id"):
        pages.insert(2, "✏️ Edit Transaction")

    page = st.sidebar.radio("Navigate to:", pages, index=0)

    st.sidebar.markdown("---")
    if st.sidebar.button("Log out"):
        set_session(None)
        st.session_state.pop("editing_id", None)
        st.rerun()

    if page == "📊 Dashboard":
        render_dashboard_page(client, session)
    elif page == "➕ Add Transaction":
        render_transaction_form(client, session, None)
    elif page == "✏️ Edit Transaction":
        render_transaction_form(client, session, st.session_state.editing_id)
    elif page == "📈 Reports":
        render_reports_page(client, session)
    elif page == "👤 Profile":
        render_profile_page(client, session)


def render_auth_page(client: FinanceApiClient):
    """Login and registration tabs."""
    st.title("Finance Tracker")

    login_tab, register_tab = st.tabs(["Log in", "Create account"])

    with login_tab:
        with st.form("login_form"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Log in", type="primary")
        if submitted:
            try:
                set_session(client.login(email, password))
                st.rerun()
            except ApiClientError as e:
                st.error(e.message)

    with register_tab:
        with st.form("register_form"):
            name = st.text_input("Name")
            email = st.text_input("Email", key="register_email")
            password = st.text_input("Password", type="password", key="register_password")
            confirm = st.text_input("Confirm password", type="password")
            submitted = st.form_submit_button("Create account", type="primary")
        if submitted:
            if password != confirm:
                st.error("Passwords do not match")
                return
            try:
                set_session(client.register(name, email, password))
                st.rerun()
            except ApiClientError as e:
                st.error(e.message)


def render_dashboard_page(client: FinanceApiClient, session: Session):
    """Totals plus the most recent transactions."""
    st.title("📊 Dashboard")

    try:
        stats = client.get_stats(session)
        transactions = client.list_transactions(session)
    except ApiClientError as e:
        show_api_error(e)
        return

    col1, col2, col3 = st.columns(3)
    col1.metric("Total Income", format_money(stats.summary.total_income))
    col2.metric("Total Expenses", format_money(stats.summary.total_expense))
    col3.metric("Net Balance", format_money(stats.summary.net_balance))

    st.markdown("---")
    st.markdown("### Recent Transactions")

    if not transactions:
        st.info("No transactions yet. Use 'Add Transaction' to record your first one.")
        return

    for transaction in transactions[:RECENT_LIMIT]:
        render_transaction_row(client, session, transaction)


def render_transaction_row(
    client: FinanceApiClient,
    session: Session,
    transaction: Transaction,
):
    css = "income" if transaction.type.value == "income" else "expense"
    sign = "+" if css == "income" else "-"

    col1, col2, col3, col4 = st.columns([4, 2, 1, 1])
    with col1:
        st.markdown(f"**{transaction.category}**  \n{transaction.date:%d %b %Y}")
        if transaction.note:
            st.caption(transaction.note)
    with col2:
        st.markdown(
            f'<span class="{css}">{sign}{format_money(transaction.amount)}</span>',
            unsafe_allow_html=True,
        )
    with col3:
        if st.button("Edit", key=f"edit_{transaction.id}"):
            st.session_state.editing_id = str(transaction.id)
            st.rerun()
    with col4:
        if st.button("Delete", key=f"delete_{transaction.id}"):
            try:
                client.delete_transaction(session, str(transaction.id))
                st.success("Transaction deleted")
                st.rerun()
            except ApiClientError as e:
                show_api_error(e)


def render_transaction_form(
    client: FinanceApiClient,
    session: Session,
    transaction_id: Optional[str],
):
    """Create a transaction, or edit one when transaction_id is given."""
    existing = None
    if transaction_id:
        st.title("✏️ Edit Transaction")
        try:
            existing = client.get_transaction(session, transaction_id)
        except ApiClientError as e:
            show_api_error(e)
            st.session_state.pop("editing_id", None)
            return
    else:
        st.title("➕ Add Transaction")

    categories = list(SUGGESTED_CATEGORIES)
    if existing and existing.category not in categories:
        categories.append(existing.category)

    with st.form("transaction_form"):
        col1, col2 = st.columns(2)
        with col1:
            type_value = st.radio(
                "Type",
                ["expense", "income"],
                index=1 if existing and existing.type.value == "income" else 0,
                horizontal=True,
            )
            amount_text = st.text_input(
                "Amount",
                value=str(existing.amount) if existing else "",
            )
        with col2:
            category = st.selectbox(
                "Category",
                categories,
                index=categories.index(existing.category) if existing else 0,
            )
            when = st.date_input(
                "Date",
                value=existing.date.date() if existing else date.today(),
            )
        note = st.text_area("Note (optional)", value=(existing.note or "") if existing else "")

        submitted = st.form_submit_button(
            "Save changes" if existing else "Add transaction",
            type="primary",
        )

    if not submitted:
        return

    try:
        amount = parse_amount(amount_text)
    except ValueError as e:
        st.error(str(e))
        return

    fields = {
        "type": type_value,
        "amount": amount,
        "category": category,
        "note": note.strip() or None,
        "date": datetime.combine(when, datetime.min.time()),
    }

    try:
        model = TransactionPatch(**fields) if existing else TransactionDraft(**fields)
    except ValidationError as e:
        first = e.errors()[0]
        st.error(f"{first['loc'][-1]}: {first['msg']}" if first.get("loc") else first["msg"])
        return

    try:
        if existing:
            client.update_transaction(session, transaction_id, model)
            st.session_state.pop("editing_id", None)
            st.success("Transaction updated")
        else:
            client.create_transaction(session, model)
            st.success("Transaction added")
    except ApiClientError as e:
        show_api_error(e)


def render_reports_page(client: FinanceApiClient, session: Session):
    """Charts over a selectable range."""
    st.title("📈 Reports")

    range_key = st.selectbox(
        "Date Range",
        list(REPORT_RANGES),
        format_func=REPORT_RANGES.get,
    )

    try:
        stats = client.get_stats(session, start_date=report_start_date(range_key))
    except ApiClientError as e:
        show_api_error(e)
        return

    if not stats.monthly_data:
        st.info("No transactions in this range.")
        return

    st.markdown("### Monthly Income vs Expense")
    st.bar_chart({
        "month": [m.month for m in stats.monthly_data],
        "Income": [float(m.income) for m in stats.monthly_data],
        "Expense": [float(m.expense) for m in stats.monthly_data],
    }, x="month")

    st.markdown("### Balance Trend")
    st.line_chart({
        "month": [p.month for p in stats.monthly_trend],
        "Balance": [float(p.balance) for p in stats.monthly_trend],
    }, x="month")

    col1, col2 = st.columns(2)
    with col1:
        st.markdown("### Expenses by Category")
        expenses = [c for c in stats.category_data if c.expense > 0]
        if expenses:
            st.bar_chart({
                "category": [c.category for c in expenses],
                "Expense": [float(c.expense) for c in expenses],
            }, x="category")
        else:
            st.caption("No expenses in this range.")
    with col2:
        st.markdown("### Top Categories")
        for stat in stats.top_categories:
            st.markdown(f"**{stat.category}**: {format_money(stat.total)}")


def render_profile_page(client: FinanceApiClient, session: Session):
    """Profile details, password change and account deletion."""
    st.title("👤 Profile")

    with st.form("profile_form"):
        name = st.text_input("Name", value=session.user.name)
        email = st.text_input("Email", value=session.user.email)
        submitted = st.form_submit_button("Update profile", type="primary")
    if submitted:
        try:
            set_session(client.update_profile(session, name=name, email=email))
            st.success("Profile updated")
        except ApiClientError as e:
            show_api_error(e)

    st.markdown("---")
    st.markdown("### Change Password")
    with st.form("password_form"):
        current = st.text_input("Current password", type="password")
        new = st.text_input("New password", type="password")
        confirm = st.text_input("Confirm new password", type="password")
        submitted = st.form_submit_button("Change password")
    if submitted:
        if new != confirm:
            st.error("Passwords do not match")
        else:
            try:
                st.success(client.change_password(session, current, new))
            except ApiClientError as e:
                show_api_error(e)

    st.markdown("---")
    st.markdown("### Delete Account")
    st.warning("This permanently deletes your account and all of your transactions.")
    confirmed = st.checkbox("I understand this cannot be undone")
    if st.button("Delete my account", disabled=not confirmed):
        try:
            client.delete_account(session)
            set_session(None)
            st.rerun()
        except ApiClientError as e:
            show_api_error(e)


if __name__ == "__main__":
    main()
