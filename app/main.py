"""
Streamlit Frontend for Personal Ledger

A thin presentation layer over LedgerEngine. It renders whatever the
engine's snapshot says and forwards form submissions; it holds no
ledger rules of its own.

Run with:
    streamlit run app/main.py
"""

import streamlit as st

from personal_ledger.config import get_settings, validate_all_settings
from personal_ledger.engine import LedgerEngine, create_ledger_engine
from personal_ledger.exceptions import PersistenceError
from personal_ledger.formatting import format_currency, format_signed_amount
from personal_ledger.models import LedgerSnapshot, TransactionType, ValidationResult
from personal_ledger.validation import SubmissionValidator


# Page configuration
st.set_page_config(
    page_title="Personal Ledger",
    page_icon="📒",
    layout="centered",
)

st.markdown("""
<style>
    .balance-card {
        padding: 24px;
        background-color: #000;
        border: 1px solid #155e75;
        border-radius: 8px;
        margin: 10px 0 20px 0;
    }
    .balance-label {
        font-size: 0.75em;
        letter-spacing: 0.2em;
        color: #0891b2;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
        color: #fff;
    }
    .credit { color: #22d3ee; font-family: monospace; }
    .debit { color: #ef4444; font-family: monospace; }
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def get_engine() -> LedgerEngine:
    """Create and restore the engine once per server process."""
    engine = create_ledger_engine()
    engine.restore()
    return engine


def render_balance(snapshot: LedgerSnapshot, symbol: str):
    """Balance card and history chart."""
    st.markdown(f"""
    <div class="balance-card">
        <div class="balance-label">TOTAL NET WORTH</div>
        <div class="big-number">{format_currency(snapshot.balance, symbol)}</div>
    </div>
    """, unsafe_allow_html=True)

    st.area_chart(
        {"balance": [point.running_balance for point in snapshot.series]},
        height=200,
    )


def render_input_form(engine: LedgerEngine):
    """Credit/debit entry form."""
    with st.form("transaction_form", clear_on_submit=True):
        tx_type = st.radio(
            "Type",
            options=list(TransactionType),
            format_func=lambda t: "📈 Income" if t is TransactionType.CREDIT else "📉 Expense",
            horizontal=True,
        )
        amount = st.text_input("Amount", placeholder="0.00")
        description = st.text_input("Description", placeholder="e.g. SALARY")
        submitted = st.form_submit_button("Record", type="primary")

    if not submitted:
        return

    try:
        result = engine.submit_transaction(amount, description, tx_type)
    except PersistenceError as e:
        st.error(f"Could not save: {e}")
        return

    if result.accepted:
        st.rerun()
    else:
        summary = SubmissionValidator().get_user_friendly_summary(
            ValidationResult(issues=result.issues)
        )
        st.warning(summary)


def render_log(snapshot: LedgerSnapshot):
    """Newest-first transaction list."""
    st.subheader("Transactions")

    if snapshot.is_empty:
        st.info("No transactions recorded yet.")
        return

    for transaction in snapshot.log:
        css = "credit" if transaction.type is TransactionType.CREDIT else "debit"
        col1, col2 = st.columns([3, 1])
        with col1:
            st.markdown(f"**{transaction.description}**  \n{transaction.date}")
        with col2:
            st.markdown(
                f'<span class="{css}">{format_signed_amount(transaction)}</span>',
                unsafe_allow_html=True,
            )


def render_status_sidebar():
    """Storage configuration status."""
    st.sidebar.title("📒 Personal Ledger")
    st.sidebar.markdown("---")

    status = validate_all_settings()
    for key in ("ledger", "google_sheets"):
        if key not in status:
            continue
        if status[key]:
            st.sidebar.success(f"✅ {key.replace('_', ' ').title()} configured")
        else:
            st.sidebar.error(f"❌ {key.replace('_', ' ').title()}: {status.get(f'{key}_error')}")


def main():
    """Main application entry point."""
    render_status_sidebar()

    try:
        engine = get_engine()
    except PersistenceError as e:
        st.error(f"Could not load the ledger: {e}")
        st.stop()

    symbol = get_settings().ledger.currency_symbol
    snapshot = engine.get_snapshot()

    render_balance(snapshot, symbol)
    render_input_form(engine)
    render_log(snapshot)


if __name__ == "__main__":
    main()
