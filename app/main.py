"""
Streamlit Frontend for Finance Splitter

The shared bill board Ire and Ebe open to see what is due and who has
paid their half.

DESIGN PRINCIPLES:
1. The next payment is always on top
2. One click to mark a bill (or a whole month) paid
3. Clear error messages for bad form input
4. Visible status when the remote store is offline

Nothing is written without an explicit button press; invalid input is
shown back to the user and nothing is saved.
"""

import asyncio
import html
from datetime import date

import streamlit as st

from finance_splitter.billing import build_bill_groups, settlement_month_names
from finance_splitter.billing.grouping import BillTypeGroup, MonthGroup
from finance_splitter.models.bill import Bill, BillSummary, Person, ValidationResult
from finance_splitter.orchestrator import BillTracker, create_app_components


# Page configuration
st.set_page_config(
    page_title="Finance Splitter",
    page_icon="💷",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .success-box {
        padding: 20px;
        background-color: #d4edda;
        border-radius: 10px;
        border-left: 5px solid #28a745;
        margin: 10px 0;
    }
    .warning-box {
        padding: 20px;
        background-color: #fff3cd;
        border-radius: 10px;
        border-left: 5px solid #ffc107;
        margin: 10px 0;
    }
    .error-box {
        padding: 20px;
        background-color: #f8d7da;
        border-radius: 10px;
        border-left: 5px solid #dc3545;
        margin: 10px 0;
    }
    .info-box {
        padding: 20px;
        background-color: #cce5ff;
        border-radius: 10px;
        border-left: 5px solid #004085;
        margin: 10px 0;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
        color: #2c3e50;
    }
</style>
""", unsafe_allow_html=True)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    return create_app_components()


def gbp(amount) -> str:
    return f"£{amount:,.2f}"


def show_issues(result: ValidationResult):
    for issue in result.issues:
        st.error(issue.message)


def main():
    """Main application entry point."""
    tracker, _ = get_components()

    # Sidebar navigation
    st.sidebar.title("💷 Finance Splitter")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📋 Bills", "➕ Add Bill", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **How it works:**
        1. Every bill is split 50/50
        2. Tick your half when you pay it
        3. Bills due within 3 days are flagged

        The Credit Card Pot is paid in any
        amounts until each half is covered.
        """
    )

    if page == "📋 Bills":
        render_bills_page(tracker)
    elif page == "➕ Add Bill":
        render_add_page(tracker)
    elif page == "⚙️ Settings":
        render_settings_page(tracker)


def render_balance_card(bills: list[Bill], summary: BillSummary):
    """Render the per-person balance for the settlement month."""
    names = settlement_month_names(bills)
    if names is None:
        st.info("No upcoming bills.")
        return

    current, following = names
    title = f"💰 {current} balance"
    if following:
        title += f" (next up: {following})"
    st.subheader(title)

    col1, col2, col3 = st.columns(3)
    with col1:
        st.markdown(f'<div class="big-number">{gbp(summary.total_amount)}</div>', unsafe_allow_html=True)
        st.caption(f"{summary.total_bills} bills this month")
    for person, col in zip(Person, (col2, col3)):
        with col:
            st.metric(
                f"{person.value} still owes",
                gbp(summary.outstanding_for(person)),
                delta=f"{gbp(summary.paid_total_for(person))} paid",
                delta_color="off",
            )

    if summary.overdue_bills:
        st.markdown(f"""
        <div class="error-box">
            <h4>⏰ {summary.overdue_bills} overdue</h4>
            <p>Some bills are past their due date and not fully paid.</p>
        </div>
        """, unsafe_allow_html=True)
    elif summary.unpaid_bills:
        st.markdown(f"""
        <div class="warning-box">
            <h4>⚠️ {summary.unpaid_bills} due soon</h4>
            <p>Some bills are due within the next few days.</p>
        </div>
        """, unsafe_allow_html=True)


def render_bills_page(tracker: BillTracker):
    """Render the bill board."""
    st.title("📋 Bills")
    today = date.today()

    with st.spinner("Loading bills..."):
        bills = run_async(tracker.load_bills(today))

    render_balance_card(bills, tracker.summarize(bills, today))
    st.markdown("---")

    for group in build_bill_groups(bills, today):
        render_bill_type(tracker, group, today)


def render_bill_type(tracker: BillTracker, group: BillTypeGroup, today: date):
    header = f"{group.name} · {gbp(group.next_month_total)}"
    if group.countdown:
        header += f" · due {group.countdown}"

    with st.expander(header, expanded=group.months[0].due_soon or group.months[0].overdue):
        for month in group.months:
            render_month(tracker, group.name, month, today)


def render_month(tracker: BillTracker, name: str, month: MonthGroup, today: date):
    badge = "✅" if month.fully_paid else "⏰" if month.overdue else "⚠️" if month.due_soon else ""
    st.markdown(f"#### {month.label} {badge}")
    st.caption(f"{gbp(month.total)} total · {gbp(month.per_person)} each")

    cols = st.columns(2)
    for person, col in zip(Person, cols):
        with col:
            paid = month.paid_by(person)
            label = f"{person.value}: {'paid' if paid else 'partial' if month.partial_for(person) else 'unpaid'}"
            if len(month.bills) > 1 and st.button(
                f"{label} · mark all {'unpaid' if paid else 'paid'}",
                key=f"month-{name}-{month.month_key}-{person.prefix}",
            ):
                run_async(tracker.set_month_payment(name, month.month_key, person, not paid, today))
                st.rerun()

    for bill in month.bills:
        render_bill(tracker, bill, today)


def render_bill(tracker: BillTracker, bill: Bill, today: date):
    st.markdown(f"**{bill.name}** · {bill.due_date.strftime('%d %B %Y')} · {gbp(bill.total_amount)}")

    if bill.is_pot:
        render_pot(tracker, bill)
    else:
        cols = st.columns(2)
        for person, col in zip(Person, cols):
            with col:
                paid = bill.is_paid_by(person)
                mark = "✅" if paid else "⬜"
                if st.button(f"{mark} {person.value}", key=f"toggle-{bill.id}-{person.prefix}"):
                    run_async(tracker.toggle_payment(bill.id, person, today))
                    st.rerun()

    if st.checkbox("✏️ Edit", key=f"edit-open-{bill.id}"):
        with st.form(key=f"edit-{bill.id}"):
            name = st.text_input("Name", value=bill.name)
            amount = st.text_input("Amount (£)", value=str(bill.total_amount))
            due_date = st.date_input("Due date", value=bill.due_date)

            col1, col2 = st.columns(2)
            save = col1.form_submit_button("💾 Save", type="primary")
            delete = col2.form_submit_button("🗑️ Delete")

        if save:
            updated, result = run_async(tracker.edit_bill(bill.id, name, amount, due_date))
            if updated is None:
                show_issues(result)
            else:
                st.rerun()
        if delete:
            run_async(tracker.delete_bill(bill.id))
            st.rerun()


def render_pot(tracker: BillTracker, bill: Bill):
    """Render cumulative contributions towards the pot."""
    share = bill.share
    cols = st.columns(2)
    for person, col in zip(Person, cols):
        with col:
            contributed = bill.paid_amount(person)
            st.progress(
                float(min(contributed / share, 1)) if share > 0 else 1.0,
                text=f"{person.value}: {gbp(contributed)} of {gbp(share)}",
            )
            with st.form(key=f"pot-{bill.id}-{person.prefix}"):
                amount = st.text_input("Add payment (£)", key=f"pot-amount-{bill.id}-{person.prefix}")
                if st.form_submit_button("Add"):
                    updated, result = run_async(tracker.record_pot_payment(bill.id, person, amount))
                    if updated is None:
                        show_issues(result)
                    else:
                        st.rerun()


def render_add_page(tracker: BillTracker):
    """Render the add-bill form."""
    st.title("➕ Add Bill")
    st.markdown("Add a one-off bill. It is split 50/50 like every other bill.")

    with st.form("add-bill"):
        name = st.text_input("Name *", placeholder="e.g., Broadband")
        amount = st.text_input("Amount (£) *", placeholder="e.g., 45.00")
        due_date = st.date_input("Due date *", value=date.today())
        submitted = st.form_submit_button("✅ Add Bill", type="primary")

    if submitted:
        bill, result = run_async(tracker.add_bill(name, amount, due_date))
        if bill is None:
            show_issues(result)
        else:
            st.markdown(f"""
            <div class="success-box">
                <h4>✅ Bill Added</h4>
                <p><strong>{html.escape(bill.name)}</strong> · {gbp(bill.total_amount)} due {bill.due_date.strftime('%d %B %Y')}</p>
            </div>
            """, unsafe_allow_html=True)


def render_settings_page(tracker: BillTracker):
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Connection Status")

    report = run_async(tracker.store_status())
    if report.is_connected:
        st.success(f"✅ Google Sheets - {report.message} ({report.bills_count} bills)")
    else:
        st.error(f"❌ Google Sheets - {report.message}")
        if report.error:
            st.caption(report.error)

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "To connect the shared spreadsheet, create a `.env` file with "
        "`GOOGLE_SHEETS_CREDENTIALS_PATH` and `GOOGLE_SHEETS_SPREADSHEET_ID`. "
        "Without them, bills are kept in the local cache only."
    )


if __name__ == "__main__":
    main()
