# Streamlit entrypoint for the Studio Cycle Planner
# Run locally with:
#   streamlit run streamlit_app.py

import logging
import random
from typing import List, Optional

import streamlit as st

import config
from api_key_store import clear_api_key, load_api_key, mask_api_key, save_api_key
from catalog import (
    CYCLE_DURATION_OPTIONS,
    DEFAULT_CYCLE_DURATION,
    DEFAULT_CYCLE_NAME,
    FOCUS_LABELS,
    LOADING_MESSAGES,
    SESSION_CONFIGS,
    theme_info,
)
from exceptions import MissingApiKeyError, PlannerError
from export_utils import export_filename, weeks_frame, workout_to_markdown, workouts_to_csv
from image_utils import file_to_payload, guess_mime_type, load_image_bytes
from planner_state import PlannerState, load_state, save_state
from schemas import CycleFocus, SessionType, Studio, Workout

config.configure_logging()
logger = logging.getLogger(__name__)

st.set_page_config(page_title="Studio Cycle Planner", layout="wide")

VIEWS = ["Dashboard", "Studios", "Create Cycle", "View Cycle", "Profile"]


def _get_state() -> PlannerState:
    if "planner_state" not in st.session_state:
        st.session_state["planner_state"] = load_state()
    return st.session_state["planner_state"]


def _persist(state: PlannerState) -> None:
    try:
        save_state(state)
    except OSError as exc:
        st.warning(f"Unable to save planner state: {exc}")


def _current_api_key() -> str:
    if "api_key" not in st.session_state:
        key = load_api_key()
        if not key:
            key = st.secrets.get("OPENAI_API_KEY", "") if _has_secrets() else ""
        st.session_state["api_key"] = key
    return st.session_state["api_key"]


def _has_secrets() -> bool:
    try:
        return "OPENAI_API_KEY" in st.secrets
    except Exception:
        return False


def _require_api_key() -> Optional[str]:
    key = _current_api_key()
    if not key:
        st.warning("Please add your OpenAI API key in Profile first.")
        return None
    return key


def _report(exc: PlannerError, action: str) -> None:
    logger.error("%s failed: %s", action, exc.to_dict())
    if isinstance(exc, MissingApiKeyError):
        st.error("API key is missing. Add it under Profile.")
    else:
        st.error(f"{action} failed: {exc.message}")


def render_api_key_prompt() -> None:
    st.header("Welcome to the Studio Cycle Planner")
    st.write(
        "- Studio analysis from a photo (equipment & space)\n"
        "- Automatic periodization for 4-16 week cycles\n"
        "- Endurance, strength and class sessions adapted per studio"
    )
    temp_key = st.text_input("OpenAI API key", type="password", key="first_run_api_key")
    if st.button("Save key", disabled=not temp_key.strip()):
        if save_api_key(temp_key):
            st.session_state["api_key"] = temp_key.strip()
            st.rerun()
        st.error("Could not save the key on this device.")
    st.caption("Create a key at https://platform.openai.com/api-keys")


# ---------- Views ----------


def render_dashboard(state: PlannerState) -> None:
    st.header("Dashboard")
    st.caption("Overview of your boxes and programming.")

    col_studios, col_phase, col_sessions = st.columns(3)
    col_studios.metric("Active studios", len(state.studios))
    cycle = state.active_cycle
    if cycle:
        col_phase.metric("Current phase", cycle.name)
        col_phase.caption(f"{cycle.duration_weeks} weeks · {FOCUS_LABELS[cycle.focus.value]}")
    else:
        col_phase.metric("Current phase", "None")
    col_sessions.metric("Generated workouts", len(state.workouts))

    if cycle:
        st.subheader("Volume load projection")
        df = weeks_frame(cycle)
        st.bar_chart(df[["volume", "intensity"]])
        st.dataframe(df, use_container_width=True)


def _render_studio_card(state: PlannerState, studio: Studio) -> None:
    with st.container(border=True):
        if studio.photo_url:
            st.image(studio.photo_url, use_container_width=True)
        st.subheader(studio.name)
        st.caption(
            f"{studio.location} · {studio.size_sqm:g} m² · up to {studio.max_capacity} athletes"
        )
        if studio.equipment:
            st.write(", ".join(f"{e.quantity}x {e.name}" for e in studio.equipment))
        else:
            st.write("No equipment recorded.")

        with st.expander("Edit equipment"):
            edited = st.data_editor(
                [e.model_dump(mode="json") for e in studio.equipment],
                num_rows="dynamic",
                key=f"equipment_editor_{studio.id}",
            )
            if st.button("Save equipment", key=f"save_equipment_{studio.id}"):
                rows = [row for row in edited if (row.get("name") or "").strip()]
                state.update_studio_equipment(studio.id, rows)
                _persist(state)
                st.rerun()

        if st.button("Remove studio", key=f"remove_{studio.id}"):
            state.remove_studio(studio.id)
            _persist(state)
            st.rerun()


def _add_studio_from_bytes(
    state: PlannerState, name: str, data: bytes, mime_type: str, location: str
) -> None:
    api_key = _require_api_key()
    if not api_key:
        return
    with st.spinner("Analyzing space..."):
        try:
            studio = state.add_studio_from_photo(
                name, file_to_payload(data), api_key, mime_type=mime_type, location=location
            )
        except PlannerError as exc:
            _report(exc, "Studio analysis")
            return
    _persist(state)
    st.success(f"Added {studio.name} ({studio.size_sqm:g} m², {len(studio.equipment)} items).")


def render_studios(state: PlannerState) -> None:
    st.header("My Studios")
    st.caption("Manage equipment and space constraints.")

    with st.container(border=True):
        st.subheader("Add new studio")
        new_name = st.text_input("Studio name", placeholder="e.g. Southside Box", key="new_studio_name")
        upload = st.file_uploader(
            "Upload photo (equipment & space)", type=["jpg", "jpeg", "png", "webp"]
        )
        col_analyze, col_demo = st.columns(2)
        if col_analyze.button("Analyze photo", disabled=not (new_name and upload)):
            _add_studio_from_bytes(
                state,
                new_name,
                upload.getvalue(),
                guess_mime_type(upload.name),
                location="Auto-detected",
            )
        if col_demo.button("Use demo photo"):
            try:
                data = load_image_bytes(config.DEMO_IMAGE)
            except PlannerError as exc:
                _report(exc, "Loading the demo photo")
            else:
                _add_studio_from_bytes(
                    state,
                    new_name or "Demo Training Studio",
                    data,
                    guess_mime_type(config.DEMO_IMAGE, default="image/png"),
                    location="Demo Location",
                )

    columns = st.columns(2)
    for idx, studio in enumerate(state.studios):
        with columns[idx % 2]:
            _render_studio_card(state, studio)


def render_create_cycle(state: PlannerState) -> None:
    st.header("New Training Cycle")
    st.caption("Use sport-science AI to create a 4-16 week progression cycle.")

    name = st.text_input("Cycle name", value=DEFAULT_CYCLE_NAME)
    focus = st.selectbox(
        "Focus",
        options=[f.value for f in CycleFocus],
        format_func=lambda v: FOCUS_LABELS[v],
    )
    duration = st.selectbox(
        "Duration",
        options=CYCLE_DURATION_OPTIONS,
        index=CYCLE_DURATION_OPTIONS.index(DEFAULT_CYCLE_DURATION),
        format_func=lambda w: f"{w} weeks",
    )
    available: List[str] = st.multiselect(
        "Restrict to equipment (optional)",
        options=state.equipment_pool(),
        help="Leave empty to let every studio use its full inventory.",
    )

    if st.button("Generate macrocycle plan", type="primary"):
        api_key = _require_api_key()
        if not api_key:
            return
        with st.spinner(random.choice(LOADING_MESSAGES)):
            try:
                state.create_cycle(name, focus, duration, api_key, available_equipment=available)
            except PlannerError as exc:
                _report(exc, "Cycle creation")
                return
        _persist(state)
        st.session_state["view"] = "View Cycle"
        st.session_state["view_week"] = 1
        st.rerun()


def _render_workout_card(workout: Workout, studio: Optional[Studio]) -> None:
    with st.container(border=True):
        text = workout_to_markdown(workout, studio)
        st.markdown(text)
        st.download_button(
            "Export",
            data=text,
            file_name=f"{export_filename(studio, workout)}.md",
            mime="text/markdown",
            key=f"export_{workout.id}",
        )


def render_view_cycle(state: PlannerState) -> None:
    cycle = state.active_cycle
    if cycle is None:
        st.header("No active cycle")
        if st.button("Create new cycle"):
            st.session_state["view"] = "Create Cycle"
            st.rerun()
        return

    st.caption(FOCUS_LABELS[cycle.focus.value].upper())
    st.header(cycle.name)
    st.write(f"{cycle.duration_weeks} weeks")
    if cycle.available_equipment:
        st.caption("Equipment constraint: " + ", ".join(cycle.available_equipment))

    week_numbers = [w.week_number for w in cycle.weeks]
    selected = st.session_state.get("view_week", week_numbers[0])
    if selected not in week_numbers:
        selected = week_numbers[0]
    week_number = st.radio(
        "Week",
        options=week_numbers,
        index=week_numbers.index(selected),
        horizontal=True,
        format_func=lambda n: f"W{n}",
    )
    st.session_state["view_week"] = week_number
    week = cycle.get_week(week_number)
    theme = theme_info(week.theme)
    st.subheader(f"Week {week.week_number}: {week.focus}")
    st.caption(f"{theme['name']} · {theme['description']} ({theme['scientific_basis']})")
    st.progress(int(week.volume), text=f"Volume {week.volume:g}")
    st.progress(int(week.intensity), text=f"Intensity {week.intensity:g}")

    session_cols = st.columns(len(SESSION_CONFIGS))
    for col, (session_type, session) in zip(session_cols, SESSION_CONFIGS.items()):
        generated = state.has_generated(week_number, session_type)
        with col:
            st.markdown(f"**{session.name}**")
            st.caption(session.description)
            label = "Show" if generated else "Create"
            if st.button(label, key=f"session_{week_number}_{session_type.value}"):
                st.session_state["view_session"] = (week_number, session_type.value)
            if generated and st.button(
                "Regenerate", key=f"regen_{week_number}_{session_type.value}"
            ):
                st.session_state["view_session"] = (week_number, session_type.value)
                st.session_state["regenerate"] = True

    selected_session = st.session_state.get("view_session")
    if not selected_session or selected_session[0] != week_number:
        return
    session_type = SessionType(selected_session[1])
    regenerate = st.session_state.pop("regenerate", False)
    if regenerate or not state.has_generated(week_number, session_type):
        api_key = _require_api_key()
        if not api_key:
            return
        with st.spinner("Adapting stimulus..."):
            try:
                state.generate_session(week_number, session_type, api_key)
            except PlannerError as exc:
                _report(exc, "Session generation")
                return
        _persist(state)

    workouts = state.workouts_for(week_number, session_type)
    studios = {studio.id: studio for studio in state.studios}
    cols = st.columns(2)
    for idx, workout in enumerate(workouts):
        with cols[idx % 2]:
            _render_workout_card(workout, studios.get(workout.studio_id))

    if workouts:
        st.download_button(
            "Download session as CSV",
            data=workouts_to_csv(workouts, state.studios),
            file_name=f"W{week_number}_{session_type.value}.csv",
            mime="text/csv",
        )


def render_profile() -> None:
    st.header("Profile")
    profile = st.session_state.setdefault(
        "user_profile",
        {
            "name": "John Doe",
            "role": "Head Coach",
            "email": "coach@functionalgym.com",
            "gym_name": "Functional HQ",
        },
    )
    with st.form("profile_form"):
        name = st.text_input("Name", value=profile["name"])
        role = st.text_input("Role", value=profile["role"])
        email = st.text_input("Email", value=profile["email"])
        gym_name = st.text_input("Gym name", value=profile["gym_name"])
        if st.form_submit_button("Update profile"):
            profile.update(name=name, role=role, email=email, gym_name=gym_name)
            st.success("Profile updated.")

    st.subheader("API key")
    current = _current_api_key()
    if current:
        st.caption(f"Saved key: {mask_api_key(current)}")
    new_key = st.text_input("OpenAI API key", type="password", key="profile_api_key")
    col_save, col_clear = st.columns(2)
    if col_save.button("Save key"):
        if save_api_key(new_key):
            st.session_state["api_key"] = new_key.strip()
            st.success("API key saved on this device.")
        else:
            st.warning("Please provide a non-empty key.")
    if col_clear.button("Forget key"):
        clear_api_key()
        st.session_state["api_key"] = ""
        st.rerun()


state = _get_state()

with st.sidebar:
    st.title("Studio Cycle Planner")
    view = st.radio(
        "Workspace",
        options=VIEWS,
        index=VIEWS.index(st.session_state.get("view", "Dashboard")),
    )
    st.session_state["view"] = view

if not _current_api_key() and not st.session_state.get("skip_api_key_prompt"):
    render_api_key_prompt()
    if st.button("Skip for now"):
        st.session_state["skip_api_key_prompt"] = True
        st.rerun()
    st.stop()

if view == "Dashboard":
    render_dashboard(state)
elif view == "Studios":
    render_studios(state)
elif view == "Create Cycle":
    render_create_cycle(state)
elif view == "View Cycle":
    render_view_cycle(state)
elif view == "Profile":
    render_profile()
