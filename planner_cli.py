import config
from api_key_store import load_api_key
from catalog import CYCLE_DURATION_OPTIONS, DEFAULT_CYCLE_DURATION, DEFAULT_CYCLE_NAME, theme_info
from exceptions import PlannerError
from export_utils import workout_to_markdown
from image_utils import file_to_payload, guess_mime_type, load_image_bytes
from planner_state import PlannerState, load_state, save_state
from schemas import CycleFocus, SessionType

MENU = {
    "studios": "List studios",
    "add": "Add a studio from a photo (path or URL)",
    "cycle": "Create a new cycle",
    "weeks": "Show the active cycle",
    "session": "Generate a session for a week",
    "show": "Show a generated session",
    "quit": "Exit",
}


def _ask(prompt: str, default: str = "") -> str:
    suffix = f" [{default}]" if default else ""
    value = input(f"{prompt}{suffix}: ").strip()
    return value or default


def _ask_choice(prompt: str, options, default: str = "") -> str:
    while True:
        value = _ask(f"{prompt} ({'/'.join(options)})", default).lower()
        if value in options:
            return value
        print("Invalid choice, please try again.")


def _ask_week(state: PlannerState) -> int:
    cycle = state.require_cycle()
    weeks = [str(w.week_number) for w in cycle.weeks]
    return int(_ask_choice("Week", weeks, weeks[0]))


def print_studios(state: PlannerState) -> None:
    if not state.studios:
        print("No studios yet.\n")
        return
    for studio in state.studios:
        equipment = ", ".join(f"{e.quantity}x {e.name}" for e in studio.equipment) or "none"
        print(
            f"  [{studio.id}] {studio.name} ({studio.location}) "
            f"{studio.size_sqm:g} m², capacity {studio.max_capacity}\n      {equipment}"
        )
    print()


def print_cycle(state: PlannerState) -> None:
    cycle = state.require_cycle()
    print(f"\n=== {cycle.name} ({cycle.focus.value}, {cycle.duration_weeks} weeks) ===")
    if cycle.available_equipment:
        print("Equipment: " + ", ".join(cycle.available_equipment))
    for week in cycle.weeks:
        sessions = [s.value for s in SessionType if state.has_generated(week.week_number, s)]
        print(
            f"  W{week.week_number:<3} {theme_info(week.theme)['name']:<26} "
            f"vol {week.volume:>5.1f}  int {week.intensity:>5.1f}  {week.focus}"
            + (f"  [{', '.join(sessions)}]" if sessions else "")
        )
    print()


def add_studio(state: PlannerState, api_key: str) -> None:
    name = _ask("Studio name", "New Studio")
    source = _ask("Photo path or URL", config.DEMO_IMAGE)
    data = load_image_bytes(source)
    studio = state.add_studio_from_photo(
        name, file_to_payload(data), api_key, mime_type=guess_mime_type(source)
    )
    print(f"Added {studio.name}: {studio.size_sqm:g} m², {len(studio.equipment)} equipment items.\n")


def create_cycle(state: PlannerState, api_key: str) -> None:
    name = _ask("Cycle name", DEFAULT_CYCLE_NAME)
    focus = _ask_choice("Focus", [f.value for f in CycleFocus], CycleFocus.HYROX.value)
    duration = int(
        _ask_choice(
            "Duration in weeks",
            [str(w) for w in CYCLE_DURATION_OPTIONS],
            str(DEFAULT_CYCLE_DURATION),
        )
    )
    restrict = _ask("Restrict equipment (comma separated, blank for none)")
    available = [item.strip() for item in restrict.split(",")] if restrict else None
    print("Generating macrocycle...")
    state.create_cycle(name, focus, duration, api_key, available_equipment=available)
    print_cycle(state)


def generate_session(state: PlannerState, api_key: str) -> None:
    week_number = _ask_week(state)
    session = _ask_choice("Session", [s.value for s in SessionType], SessionType.ENDURANCE.value)
    print("Adapting stimulus...")
    state.generate_session(week_number, session, api_key)
    show_session(state, week_number, session)


def show_session(state: PlannerState, week_number: int = 0, session: str = "") -> None:
    week_number = week_number or _ask_week(state)
    session = session or _ask_choice(
        "Session", [s.value for s in SessionType], SessionType.ENDURANCE.value
    )
    workouts = state.workouts_for(week_number, session)
    if not workouts:
        print("Nothing generated for that session yet.\n")
        return
    studios = {studio.id: studio for studio in state.studios}
    for workout in workouts:
        print(workout_to_markdown(workout, studios.get(workout.studio_id)))


def main():
    config.configure_logging()
    state = load_state()
    api_key = load_api_key()
    if not api_key:
        print("(Note: no API key found. Set OPENAI_API_KEY or save one in the app's Profile.)\n")

    actions = {
        "studios": lambda: print_studios(state),
        "add": lambda: add_studio(state, api_key),
        "cycle": lambda: create_cycle(state, api_key),
        "weeks": lambda: print_cycle(state),
        "session": lambda: generate_session(state, api_key),
        "show": lambda: show_session(state),
    }

    while True:
        print("Choose action:")
        for key, label in MENU.items():
            print(f"  - {key:<8} {label}")

        choice = input("> ").strip().lower()

        if choice in {"quit", "q", "exit"}:
            print("Exiting. Bye!\n")
            break

        if choice not in actions:
            print("Invalid choice, please try again.\n")
            continue

        try:
            actions[choice]()
        except PlannerError as exc:
            print(f"\n[ERROR] {exc.message}\n")
            continue
        save_state(state)


if __name__ == "__main__":
    main()
