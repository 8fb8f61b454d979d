from datetime import date

import streamlit as st
import pandas as pd
import plotly.express as px

from civ_league.config import (
    ABSENT_POINTS,
    DEFAULT_PLAYERS,
    DIFFICULTIES,
    LATEST_RESULTS_LIMIT,
    MAX_HANDICAP_TURNS,
    MAX_PLACEMENT,
    SEED_PLAYER,
)
from civ_league.core.history import by_placement, completed, latest_results, ongoing, result_summary, winner_name
from civ_league.store.session_store import SessionStore, StoreError

# --- Page Configuration ---
st.set_page_config(
    page_title="Civ VI League",
    page_icon="🏛️",
    layout="wide",
    initial_sidebar_state="collapsed"
)

# --- Design System ---
ACCENT_COLORS = {
    "primary": "#FF6B6B",
    "chart_palette": [
        "#FF6B6B", "#3B82F6", "#10B981", "#F59E0B", "#8B5CF6",
        "#EC4899", "#06B6D4", "#84CC16", "#F97316", "#6366F1"
    ],
}

# Tab name to URL slug mapping (for cleaner URLs)
TAB_SLUGS = {
    "🆕 New Session": "new",
    "⏳ Ongoing": "ongoing",
    "🏅 Table": "table",
    "🕑 Latest 10": "latest",
    "📜 History": "history",
    "📖 House Rules": "rules",
}
TAB_OPTIONS = list(TAB_SLUGS)
SLUG_TO_TAB = {v: k for k, v in TAB_SLUGS.items()}

ENTRY_COLUMNS = {
    "place": st.column_config.NumberColumn("Place", min_value=0, max_value=MAX_PLACEMENT, step=1),
    "player": st.column_config.TextColumn("Player"),
    "leader": st.column_config.TextColumn("Leader"),
    "difficulty": st.column_config.SelectboxColumn("Difficulty", options=list(DIFFICULTIES)),
    "handicap_turns": st.column_config.NumberColumn("HC (+turns)", min_value=0, max_value=MAX_HANDICAP_TURNS, step=1),
    "exit_turn": st.column_config.NumberColumn("Turn (out)", min_value=0, step=1),
    "points": st.column_config.NumberColumn("Points", format="%d"),
    "winner": st.column_config.CheckboxColumn("Winner"),
    "absent": st.column_config.CheckboxColumn(f"Absent (+{ABSENT_POINTS})"),
}
EDITOR_FIELDS = ["place", "player", "leader", "difficulty", "handicap_turns", "exit_turn", "absent"]


def switch_tab(slug):
    """Queue a tab change; applied before the navigation radio is drawn on the next run."""
    st.session_state["pending_tab"] = slug
    st.query_params["tab"] = slug


def get_store():
    """Open the store for this script run; state lives on disk, not in the session."""
    return SessionStore.open()


def _clean(value):
    """Convert an edited cell to a plain Python value."""
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    if isinstance(value, float):
        return int(value)
    if hasattr(value, "item"):
        return value.item()
    return value


def entries_frame(entries, ordered=True):
    rows = [e.to_dict() for e in (by_placement(entries) if ordered else entries)]
    df = pd.DataFrame(rows, columns=["id"] + list(ENTRY_COLUMNS))
    return df.set_index("id")


def session_caption(session):
    text = pd.Timestamp(session.played_at).strftime("%Y-%m-%d") if session.played_at else "-"
    if session.turns:
        text += f" · {session.turns} turns"
    if session.notes:
        text += f" · {session.notes}"
    return text


def apply_entry_edits(store, original, edited):
    """Push every changed cell of an entry editor back through the store; returns edited entry count."""
    count = 0
    for entry_id, row in edited.iterrows():
        changes = {}
        for field in EDITOR_FIELDS:
            old, new = _clean(original.at[entry_id, field]), _clean(row[field])
            if old != new:
                changes[field] = new
        if changes:
            store.update_entry(entry_id, **changes)
            count += 1
    return count


def render_entry_table(store, result, editable):
    df = entries_frame(result.entries, ordered=not editable)
    if not editable:
        st.dataframe(df, width='stretch', hide_index=True, column_config=ENTRY_COLUMNS)
        return

    edited = st.data_editor(
        df,
        width='stretch',
        hide_index=True,
        column_config=ENTRY_COLUMNS,
        disabled=["points", "winner"],
        key=f"editor_{result.session.id}",
    )
    try:
        changed = apply_entry_edits(store, df, edited)
    except StoreError as e:
        st.error(str(e))
    else:
        if changed:
            # Edits are row-position deltas; drop them once applied
            st.session_state.pop(f"editor_{result.session.id}", None)
            st.rerun()


def render_new_session(store):
    seeding = not store.state.has_completed
    if seeding:
        st.info(f"First session: {SEED_PLAYER} starts at Deity +1 turn, everyone else at Settler.")

    with st.form("new_session"):
        col1, col2 = st.columns(2)
        played_at = col1.date_input("Date", value=date.today())
        turns = col2.number_input("Total turns (optional)", min_value=0, value=0, step=1)
        notes = st.text_area("Note", placeholder="Short comment")

        roster = []
        for i, slot in enumerate(store.roster_defaults(DEFAULT_PLAYERS)):
            cols = st.columns([2, 2, 1, 2, 1, 1, 1])
            player = cols[0].text_input("Player", value=slot["player"], key=f"roster_player_{i}")
            difficulty = cols[1].selectbox(
                "Difficulty", DIFFICULTIES, index=DIFFICULTIES.index(slot["difficulty"]), key=f"roster_diff_{i}"
            )
            handicap = cols[2].selectbox(
                "HC", list(range(MAX_HANDICAP_TURNS + 1)), index=min(slot["handicap_turns"], MAX_HANDICAP_TURNS), key=f"roster_hc_{i}"
            )
            leader = cols[3].text_input("Leader/civ", key=f"roster_leader_{i}")
            absent = cols[4].checkbox(f"Absent (+{ABSENT_POINTS})", key=f"roster_absent_{i}")
            place = cols[5].selectbox("Place", [0] + list(range(1, MAX_PLACEMENT + 1)), key=f"roster_place_{i}")
            exit_turn = cols[6].number_input("Turn (out)", min_value=0, value=0, step=1, key=f"roster_exit_{i}")
            roster.append({
                **slot,
                "player": player,
                "difficulty": difficulty,
                "handicap_turns": handicap,
                "leader": leader,
                "absent": absent,
                "place": place or None,
                "exit_turn": exit_turn or None,
            })

        submitted = st.form_submit_button("Save as ongoing", type="primary")

    if submitted:
        try:
            store.create_session(
                played_at.strftime("%Y-%m-%d"),
                roster,
                turns=int(turns) or None,
                notes=notes,
            )
        except StoreError as e:
            st.error(str(e))
        else:
            switch_tab("ongoing")
            st.rerun()


def render_sessions(store, results, editable):
    for result in results:
        with st.container(border=True):
            col1, col2, col3 = st.columns([4, 1, 1])
            col1.caption(session_caption(result.session))
            if editable and col2.button("Mark completed", key=f"complete_{result.session.id}"):
                store.mark_completed(result.session.id)
                st.rerun()
            if col3.button("Delete session", key=f"delete_{result.session.id}", type="secondary"):
                store.delete_session(result.session.id)
                st.rerun()

            render_entry_table(store, result, editable)

            if editable:
                entry_ids = [e.id for e in result.entries]
                labels = {e.id: f"{e.player or '-'} ({e.place or '-'})" for e in result.entries}
                remove = st.selectbox(
                    "Remove row",
                    entry_ids,
                    index=None,
                    format_func=labels.get,
                    key=f"remove_{result.session.id}",
                    placeholder="Remove row...",
                    label_visibility="collapsed",
                )
                if remove:
                    store.delete_entry(remove)
                    st.rerun()


def render_table(store):
    board = store.leaderboard()
    if board.empty:
        st.info("No data yet.")
        return

    st.dataframe(
        board,
        width='stretch',
        hide_index=True,
        column_config={
            "rank": st.column_config.NumberColumn("#", format="%d"),
            "player": st.column_config.TextColumn("Player"),
            "played": st.column_config.NumberColumn("Games", format="%d", help="Absences not counted"),
            "wins": st.column_config.NumberColumn("Wins", format="%d"),
            "points": st.column_config.NumberColumn("Points", format="%d"),
            "avg_place": st.column_config.NumberColumn("Avg Place", format="%.2f"),
        },
    )

    fig = px.bar(
        board,
        x="player",
        y="points",
        color="player",
        color_discrete_sequence=ACCENT_COLORS["chart_palette"],
        labels={"player": "Player", "points": "Points"},
    )
    fig.update_layout(showlegend=False, margin=dict(l=0, r=0, t=10, b=0), height=320)
    st.plotly_chart(fig, use_container_width=True, config={'displayModeBar': False})

    ladder = pd.DataFrame([p.to_dict() for p in store.state.ladder.values()])
    if not ladder.empty:
        st.subheader("Difficulty Ladder")
        st.dataframe(
            ladder,
            width='stretch',
            hide_index=True,
            column_config={
                "player": st.column_config.TextColumn("Player"),
                "difficulty": st.column_config.TextColumn("Difficulty"),
                "deity_turns": st.column_config.NumberColumn("Deity +turns", format="%d"),
            },
        )


def render_latest(results):
    latest = latest_results(results, LATEST_RESULTS_LIMIT)
    if not latest:
        st.info("No matches yet.")
        return
    for result in latest:
        with st.container(border=True):
            col1, col2 = st.columns([3, 1])
            col1.caption(session_caption(result.session))
            col2.markdown(f"Winner: **{winner_name(result.entries)}**")
            st.caption(result_summary(result.entries))


def main():
    store = get_store()

    st.title("Civ VI League")

    with st.sidebar:
        st.header("📥 Export Data")
        board = store.leaderboard()
        st.download_button(
            "Download Table CSV",
            data=board.to_csv(index=False),
            file_name="leaderboard.csv",
            mime="text/csv",
            disabled=board.empty,
        )

        st.markdown("---")
        st.header("⚠️ Reset")
        confirm = st.checkbox("Clear ALL history and reset the starting ladder")
        if st.button("Clear history", disabled=not confirm):
            store.clear_history()
            switch_tab("new")
            st.rerun()

    # Read tab from URL query params (persists across reloads)
    url_tab = st.query_params.get("tab", "new")
    default_tab = SLUG_TO_TAB.get(url_tab, TAB_OPTIONS[0])
    pending = st.session_state.pop("pending_tab", None)
    if pending in SLUG_TO_TAB:
        st.session_state["tab_selector"] = SLUG_TO_TAB[pending]

    active_tab = st.radio(
        "Navigation",
        TAB_OPTIONS,
        index=TAB_OPTIONS.index(default_tab),
        horizontal=True,
        label_visibility="collapsed",
        key="tab_selector"
    )
    new_slug = TAB_SLUGS[active_tab]
    if url_tab != new_slug:
        st.query_params["tab"] = new_slug

    results = store.history()

    if active_tab == "🆕 New Session":
        st.subheader("Register Session")
        render_new_session(store)

    if active_tab == "⏳ Ongoing":
        st.subheader("Ongoing Sessions")
        sessions = ongoing(results)
        if not sessions:
            st.info("No ongoing sessions - create a new one.")
        render_sessions(store, sessions, editable=True)

    if active_tab == "🏅 Table":
        st.subheader("Table")
        render_table(store)
        st.caption("Difficulty and handicap per session are shown under Ongoing.")

    if active_tab == "🕑 Latest 10":
        st.subheader(f"Latest {LATEST_RESULTS_LIMIT} Matches")
        render_latest(results)

    if active_tab == "📜 History":
        st.subheader("History (completed)")
        sessions = completed(results)
        if not sessions:
            st.info("No completed sessions yet.")
        render_sessions(store, sessions, editable=False)

    if active_tab == "📖 House Rules":
        st.subheader("House Rules")
        rules = st.text_area("House rules", value=store.state.house_rules, height=240,
                             placeholder="Write your house rules here...", label_visibility="collapsed")
        if rules != store.state.house_rules:
            try:
                store.set_house_rules(rules)
            except StoreError as e:
                st.error(str(e))

    st.caption(
        f"Absent +{ABSENT_POINTS}p. 3 players: 10/6/3. 4 players: 10/6/3/1. "
        "Difficulty moves up/down after a completed session. Deity win ⇒ +1 turn. "
        f"First session is seeded: {SEED_PLAYER} Deity+1, others Settler."
    )


if __name__ == "__main__":
    main()
