"""Activity history page."""

from __future__ import annotations
from typing import Any, Dict

import pandas as pd
import streamlit as st

from services.repositories import ActivityRepository, ACTIVITY_TYPES


def render_history(catalog: Dict[str, Any]) -> None:
    st.subheader("Activity History")

    types = st.multiselect("Type", list(ACTIVITY_TYPES), default=list(ACTIVITY_TYPES), key="history_types")
    logs = [e for e in ActivityRepository.list_recent(catalog) if e.get("type") in types]
    if not logs:
        st.caption("No activity recorded.")
        return

    df = pd.DataFrame(logs)[["timestamp", "type", "description", "user"]]
    st.dataframe(df, use_container_width=True, hide_index=True)
