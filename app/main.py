"""
Streamlit Frontend for Card Ledger

The dashboard a cardholder opens to see where each card stands this
month: spend, rewards earned, caps, and what needs attention.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Every change goes through the ledger
3. Clear error messages in simple language
4. Visual feedback for all operations
5. No hidden actions

Run with:
    streamlit run app/main.py
"""

from datetime import date

import streamlit as st
from pydantic import ValidationError

from card_ledger.config import get_settings, validate_all_settings
from card_ledger.ledger import Ledger, create_ledger
from card_ledger.models import AlertType, CardInput, CardPatch, CardType, EarningRate
from card_ledger.queries import best_rates_by_category, payment_status, portfolio_summary
from card_ledger.rewards import category_rewards, reward_earned, total_spend


# Page configuration
st.set_page_config(
    page_title="Card Ledger",
    page_icon="💳",
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
    .alert-box {
        padding: 16px;
        background-color: #fff3cd;
        border-radius: 10px;
        border-left: 5px solid #ffc107;
        margin: 10px 0;
    }
    .read-box {
        padding: 16px;
        background-color: #f1f3f5;
        border-radius: 10px;
        border-left: 5px solid #adb5bd;
        margin: 10px 0;
    }
</style>
""", unsafe_allow_html=True)


ALERT_ICONS = {
    AlertType.PAYMENT_DUE: "💸",
    AlertType.ANNUAL_FEE: "📅",
    AlertType.FEE_WAIVER: "🎯",
    AlertType.CATEGORY_LIMIT: "📊",
    AlertType.CREDIT_LIMIT: "⚠️",
}


@st.cache_resource
def get_ledger() -> Ledger:
    """Get or create the ledger (cached across reruns)."""
    return create_ledger()


def money(amount: float) -> str:
    return f"{get_settings().app.currency_label} {amount:,.2f}"


def main():
    """Main application entry point."""
    ledger = get_ledger()
    # Sessions run on separate threads and share one cached ledger
    with ledger.lock:
        render_app(ledger)


def render_app(ledger: Ledger):
    """Sidebar navigation and the selected page."""
    ledger.refresh_alerts()

    summary = portfolio_summary(ledger.get_cards(), ledger.get_alerts())

    # Sidebar navigation
    st.sidebar.title("💳 Card Ledger")
    st.sidebar.markdown("---")

    alerts_label = "🔔 Alerts"
    if summary.unread_alerts:
        alerts_label += f" ({summary.unread_alerts})"

    page = st.sidebar.radio(
        "Navigate to:",
        ["📊 Overview", "💳 Cards", alerts_label, "💾 Data", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        f"""
        **Portfolio:**
        - {summary.active_cards} active of {summary.total_cards} cards
        - {summary.unread_alerts} unread alerts
        """
    )

    # Route to appropriate page
    if page == "📊 Overview":
        render_overview_page(ledger)
    elif page == "💳 Cards":
        render_cards_page(ledger)
    elif page == alerts_label:
        render_alerts_page(ledger)
    elif page == "💾 Data":
        render_data_page(ledger)
    elif page == "⚙️ Settings":
        render_settings_page()


def render_overview_page(ledger: Ledger):
    """Render totals, effective rates and best cards per category."""
    st.title("📊 Overview")

    miles = ledger.get_miles_cards_stats()
    cashback = ledger.get_cashback_cards_stats()

    col1, col2, col3 = st.columns(3)
    col1.metric("Total spend", money(ledger.get_total_spend()))
    col2.metric(
        "Miles earned",
        f"{miles.total_miles:,.0f}",
        help=f"{miles.effective_rate:.2f} miles per dollar",
    )
    col3.metric(
        "Cashback earned",
        money(cashback.total_cashback),
        help=f"{cashback.effective_rate:.2%} effective rate",
    )

    st.markdown("---")
    st.subheader("Best card per category")

    cards = ledger.get_cards()
    for card_type, unit in ((CardType.MILES, "mpd"), (CardType.CASHBACK, "%")):
        best = best_rates_by_category(cards, card_type)
        if not best:
            continue
        st.markdown(f"**{card_type.value.title()}**")
        st.table([
            {"Category": category, "Rate": f"{entry.rate:g} {unit}", "Cards": ", ".join(entry.card_names)}
            for category, entry in sorted(best.items())
        ])


def render_cards_page(ledger: Ledger):
    """Render the card list with spend entry and the add-card form."""
    st.title("💳 Your Cards")

    cards = ledger.get_cards()
    if not cards:
        st.info("No cards yet. Add your first card below.")

    paid_periods = ledger.get_paid_payment_periods()
    quick_amounts = get_settings().app.quick_spend_amounts_list

    for card in cards:
        status = payment_status(card, paid_periods, date.today())
        header = f"{card.name} ({card.bank})"
        if not card.is_active:
            header += " - inactive"

        with st.expander(header):
            col1, col2, col3 = st.columns(3)
            col1.metric("Spend", money(total_spend(card)))
            col2.metric("Earned", f"{reward_earned(card):,.2f}")
            col3.metric("Payment", status.label)

            breakdown = category_rewards(card)
            if breakdown:
                st.table([
                    {
                        "Category": entry.category,
                        "Spend": money(entry.amount),
                        "Rate": entry.rate,
                        "Cap used": f"{entry.cap_usage_pct:.0f}%" if entry.cap_usage_pct is not None else "-",
                        "Reward": f"{entry.reward:,.2f}",
                    }
                    for entry in breakdown
                ])

            if status.is_paid and st.button("↩️ Unmark paid", key=f"unpaid_{card.id}"):
                ledger.unmark_payment_paid(card.id, status.next_due)
                st.rerun()

            render_spend_form(ledger, card, quick_amounts)
            render_edit_card_form(ledger, card)

            col1, col2 = st.columns(2)
            with col1:
                label = "Deactivate" if card.is_active else "Activate"
                if st.button(label, key=f"toggle_{card.id}"):
                    ledger.update_card(card.id, {"is_active": not card.is_active})
                    st.rerun()
            with col2:
                if st.button("🗑️ Delete card", key=f"delete_{card.id}"):
                    ledger.delete_card(card.id)
                    st.rerun()

    st.markdown("---")
    render_add_card_form(ledger)


def render_spend_form(ledger: Ledger, card, quick_amounts: list[float]):
    """Set the spend for one category of a card."""
    categories = [rate.category for rate in card.earning_rates]
    if not categories:
        st.caption("Add earning rates to record spend by category.")
        return

    col1, col2 = st.columns(2)
    with col1:
        category = st.selectbox("Category", categories, key=f"cat_{card.id}")
    with col2:
        amount = st.number_input(
            "Amount this month",
            min_value=0.0,
            step=10.0,
            value=card.spend_for(category),
            key=f"amt_{card.id}",
        )

    quick_cols = st.columns(len(quick_amounts) or 1)
    for col, quick in zip(quick_cols, quick_amounts):
        if col.button(f"+{quick:g}", key=f"quick_{card.id}_{quick}"):
            ledger.update_card_spend(card.id, category, card.spend_for(category) + quick)
            st.rerun()

    if st.button("💾 Save spend", key=f"spend_{card.id}"):
        ledger.update_card_spend(card.id, category, amount)
        st.rerun()


def render_edit_card_form(ledger: Ledger, card):
    """Edit limits, fees and dates of an existing card."""
    with st.form(f"edit_{card.id}"):
        st.markdown("**Edit card**")
        col1, col2 = st.columns(2)
        with col1:
            name = st.text_input("Card name", value=card.name)
            credit_limit = st.number_input("Credit limit", min_value=0.0, value=card.credit_limit)
            payment_due_date = st.number_input(
                "Payment due day",
                min_value=1,
                max_value=31,
                value=card.payment_due_date,
            )
        with col2:
            annual_fee = st.number_input("Annual fee", min_value=0.0, value=card.annual_fee)
            annual_fee_waiver = st.number_input(
                "Annual spend to waive fee",
                min_value=0.0,
                value=card.annual_fee_waiver,
            )
            annual_fee_date = st.text_input("Annual fee date (MM-DD)", value=card.annual_fee_date)

        if st.form_submit_button("💾 Save changes"):
            try:
                ledger.update_card(card.id, CardPatch(
                    name=name,
                    credit_limit=credit_limit,
                    annual_fee=annual_fee,
                    annual_fee_waiver=annual_fee_waiver,
                    payment_due_date=int(payment_due_date),
                    annual_fee_date=annual_fee_date,
                ))
                st.rerun()
            except ValidationError as e:
                st.error(f"Please check the card details: {e.errors()[0]['msg']}")


def render_add_card_form(ledger: Ledger):
    """Form for a new card."""
    st.subheader("➕ Add a card")

    with st.form("add_card", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            name = st.text_input("Card name *")
            bank = st.text_input("Bank *")
            card_type = st.selectbox(
                "Card type *",
                options=list(CardType),
                format_func=lambda x: x.value.title(),
            )
            payment_due_date = st.number_input("Payment due day *", min_value=1, max_value=31, value=1)
        with col2:
            credit_limit = st.number_input("Credit limit", min_value=0.0, step=100.0)
            annual_fee = st.number_input("Annual fee", min_value=0.0, step=10.0)
            annual_fee_waiver = st.number_input("Annual spend to waive fee", min_value=0.0, step=100.0)
            annual_fee_date = st.text_input("Annual fee date (MM-DD) *", value="01-01")

        rates_text = st.text_area(
            "Earning rates",
            placeholder="One per line: category, rate[, monthly cap]\nDining, 4, 1000",
        )

        if st.form_submit_button("Add card", type="primary"):
            try:
                card = ledger.add_card(CardInput(
                    name=name,
                    bank=bank,
                    card_type=card_type,
                    earning_rates=parse_earning_rates(rates_text),
                    credit_limit=credit_limit,
                    annual_fee=annual_fee,
                    annual_fee_waiver=annual_fee_waiver,
                    payment_due_date=int(payment_due_date),
                    annual_fee_date=annual_fee_date,
                ))
                st.success(f"✅ Added {card.name}")
            except ValidationError as e:
                st.error(f"Please check the card details: {e.errors()[0]['msg']}")
            except ValueError as e:
                st.error(str(e))


def parse_earning_rates(text: str) -> list[EarningRate]:
    """Parse 'category, rate[, cap]' lines."""
    rates = []
    for line_no, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        parts = [part.strip() for part in line.split(",")]
        if len(parts) not in (2, 3):
            raise ValueError(f"Line {line_no}: expected 'category, rate[, cap]'")
        try:
            rate = float(parts[1])
            cap = float(parts[2]) if len(parts) == 3 and parts[2] else None
        except ValueError:
            raise ValueError(f"Line {line_no}: rate and cap must be numbers")
        rates.append(EarningRate(category=parts[0], rate=rate, cap=cap))
    return rates


def render_alerts_page(ledger: Ledger):
    """Render alerts, unread first."""
    st.title("🔔 Alerts")

    alerts = ledger.get_alerts(sort=True)
    if not alerts:
        st.success("Nothing needs your attention right now.")
        return

    cards = {card.id: card for card in ledger.get_cards()}

    for alert in alerts:
        card = cards.get(alert.card_id)
        box = "read-box" if alert.is_read else "alert-box"
        st.markdown(f"""
        <div class="{box}">
            <h4>{ALERT_ICONS.get(alert.type, "🔔")} {alert.title}</h4>
            <p>{alert.message}</p>
            <p><small>{card.name if card else alert.card_id} · {alert.due_date.strftime('%d %B %Y')}</small></p>
        </div>
        """, unsafe_allow_html=True)

        col1, col2, col3 = st.columns(3)
        with col1:
            if not alert.is_read and st.button("Mark read", key=f"read_{alert.id}"):
                ledger.mark_alert_read(alert.id)
                st.rerun()
        with col2:
            if alert.is_resolvable:
                label = "✅ Mark paid" if alert.type == AlertType.PAYMENT_DUE else "✅ Resolve"
                if st.button(label, key=f"resolve_{alert.id}"):
                    ledger.mark_alert_resolved(alert.id)
                    st.rerun()
        with col3:
            if st.button("Dismiss", key=f"dismiss_{alert.id}"):
                ledger.delete_alert(alert.id)
                st.rerun()


def render_data_page(ledger: Ledger):
    """Export, import and clear."""
    st.title("💾 Data")

    st.subheader("Export")
    st.download_button(
        "⬇️ Download backup",
        data=ledger.export_data(),
        file_name=ledger.export_filename(),
        mime="application/json",
    )

    st.markdown("---")
    st.subheader("Import")
    st.warning("Importing replaces all current cards and alerts.")
    uploaded = st.file_uploader("Choose a backup file", type=["json"])
    if uploaded and st.button("⬆️ Import", type="primary"):
        result = ledger.import_data(uploaded.getvalue())
        if result.success:
            st.success(result.message)
            for warning in result.warnings:
                st.warning(warning)
        else:
            st.error(result.message)

    st.markdown("---")
    st.subheader("Clear")
    confirm = st.checkbox("I understand this deletes every card and alert")
    if st.button("🗑️ Clear all data", disabled=not confirm):
        ledger.clear_all_data()
        st.success("All data cleared")
        st.rerun()


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Configuration Status")
    status = validate_all_settings()
    for name in ("alerts", "storage", "export", "app"):
        if status.get(name, False):
            st.success(f"✅ {name.title()} settings loaded")
        else:
            st.error(f"❌ {name.title()} - {status.get(f'{name}_error', 'Invalid')}")

    settings = get_settings()
    alerts = settings.alerts
    st.markdown("### Alert thresholds")
    st.table([
        {"Setting": "Payment due window (days)", "Value": alerts.payment_due_days},
        {"Setting": "Annual fee window (days)", "Value": alerts.annual_fee_days},
        {"Setting": "Category cap usage (%)", "Value": alerts.category_limit_percentage},
        {"Setting": "Credit utilization (%)", "Value": alerts.credit_limit_percentage},
        {"Setting": "Fee waiver remaining spend", "Value": alerts.fee_waiver_threshold},
    ])

    st.markdown("---")
    st.markdown(
        "Thresholds are read from `CARD_LEDGER_ALERT_*` environment variables "
        "or a `.env` file. Storage location: "
        f"`{settings.storage.path}`."
    )


if __name__ == "__main__":
    main()
