from datetime import date

import pandas as pd
import streamlit as st

from celebration_api.services.admin_client import AdminClient, AdminClientError

# Page Config
st.set_page_config(
    page_title="Celebration House Admin",
    page_icon="🎉",
    layout="wide"
)

st.title("Celebration House - Admin Panel")

client = AdminClient()

COLUMNS = {
    "uniqueId": "Booking ID",
    "customerName": "Customer",
    "contactNumber": "Contact",
    "eventDate": "Date",
    "eventTime": "Time",
    "branch": "Branch",
    "selectedPackage": "Package",
    "celebrationType": "Celebration",
    "amount": "Amount",
}


def to_frame(bookings):
    df = pd.DataFrame(bookings)
    if df.empty:
        return df
    return df[[c for c in COLUMNS if c in df.columns]].rename(columns=COLUMNS)


def show_metrics(df):
    col1, col2, col3 = st.columns(3)
    col1.metric("Bookings", len(df))
    col2.metric("Total amount", f"{df['Amount'].sum():,.2f}" if "Amount" in df else "0")
    col3.metric("Branches", df["Branch"].nunique() if "Branch" in df else 0)


if st.button("Refresh"):
    st.rerun()

# Status
with st.sidebar:
    st.subheader("Status")
    try:
        status = client.health()
        st.success(f"API and database up ({status.get('uptime', 0):.0f}s uptime)")
    except AdminClientError as e:
        st.error(f"API or database down: {e}")

# Tomorrow's reminders
st.subheader("Tomorrow")
try:
    message, bookings = client.tomorrow_bookings()
    st.caption(message)
    tomorrow_df = to_frame(bookings)
    if tomorrow_df.empty:
        st.info("No bookings for tomorrow.")
    else:
        show_metrics(tomorrow_df)
        st.dataframe(tomorrow_df, use_container_width=True, hide_index=True)
except AdminClientError as e:
    st.error(f"Could not load tomorrow's bookings: {e}")

# Browse
st.subheader("Browse bookings")
mode = st.radio("Filter by", ["Month", "Exact date"], horizontal=True)
branch = st.text_input("Branch (leave empty for all)", value="")

filters = {"branch": branch or None}
if mode == "Exact date":
    filters["date"] = st.date_input("Date", value=date.today()).isoformat()
else:
    today = date.today()
    filters["month"] = st.number_input("Month", min_value=1, max_value=12, value=today.month)
    filters["year"] = st.number_input("Year", min_value=1000, max_value=9999, value=today.year)

try:
    browse_df = to_frame(client.filtered_bookings(**filters))
    if browse_df.empty:
        st.info("No bookings found for the selected filters.")
    else:
        show_metrics(browse_df)
        st.dataframe(browse_df, use_container_width=True, hide_index=True)
except AdminClientError as e:
    st.error(f"Could not load bookings: {e}")

# Footer
st.markdown("---")
st.caption("Celebration House • Booking Admin")
