from __future__ import annotations

from typing import Any, Dict, List

from schemas import SessionConfig, SessionType, Studio, WeeklyTheme

CYCLE_DURATION_OPTIONS = [4, 6, 8, 10, 12, 16]
DEFAULT_CYCLE_NAME = "Winter Hyrox Prep"
DEFAULT_CYCLE_DURATION = 8
DEFAULT_CLASS_SIZE = 15

# Functional floor space per athlete, used to derive capacity from a photo estimate
SQM_PER_ATHLETE = 6

DEFAULT_STUDIOS: List[Dict[str, Any]] = [
    {
        "id": "s1",
        "name": "Downtown Box",
        "location": "Berlin Mitte",
        "sizeSqM": 120,
        "maxCapacity": 15,
        "equipment": [
            {"name": "Concept2 Rower", "quantity": 8, "category": "cardio"},
            {"name": "Barbell", "quantity": 15, "category": "weight"},
            {"name": "Pullup Rig", "quantity": 1, "category": "gymnastic"},
        ],
    },
    {
        "id": "s2",
        "name": "Garage Gym",
        "location": "Potsdam",
        "sizeSqM": 80,
        "maxCapacity": 10,
        "equipment": [
            {"name": "Assault Bike", "quantity": 4, "category": "cardio"},
            {"name": "Dumbbells", "quantity": 20, "category": "weight"},
            {"name": "Box", "quantity": 10, "category": "gymnastic"},
        ],
    },
]

LOADING_MESSAGES = [
    "Initializing Sport Science Model...",
    "Analyzing physiological demands...",
    "Structuring Mesocycle phases...",
    "Calculating progressive overload...",
    "Integrating deload & recovery weeks...",
    "Optimizing volume vs intensity...",
    "Finalizing periodization logic...",
]

SESSION_CONFIGS: Dict[SessionType, SessionConfig] = {
    SessionType.ENDURANCE: SessionConfig(
        type=SessionType.ENDURANCE,
        name="HYROX Endurance",
        description="Aerobic capacity, running economy, and sustained effort training",
        color="blue",
    ),
    SessionType.STRENGTH: SessionConfig(
        type=SessionType.STRENGTH,
        name="HYROX Strength",
        description="Functional strength for sled, sandbag, and farmer carries",
        color="red",
    ),
    SessionType.CLASS: SessionConfig(
        type=SessionType.CLASS,
        name="HYROX Class",
        description="Race simulation with transition practice and pacing",
        color="orange",
    ),
}

HYROX_EQUIPMENT = [
    "SkiErg",
    "Concept2 Rower",
    "Assault Bike / Air Bike",
    "Sled",
    "Burpee Broad Jump Space",
    "Sandbag (10-20kg)",
    "Wall Balls (6-9kg)",
    "Farmer Carry Kettlebells/Dumbbells",
]

WEEKLY_THEMES: Dict[WeeklyTheme, Dict[str, str]] = {
    WeeklyTheme.INTERVALS: {
        "name": "High-Intensity Intervals",
        "description": "VO2max development through repeated short, intense efforts",
        "scientific_basis": "Tabata Protocol, 4x4 Norwegian Method",
    },
    WeeklyTheme.ZONE2: {
        "name": "Zone 2 Endurance",
        "description": "Aerobic base building at conversational pace",
        "scientific_basis": "Polarized Training Model (Seiler & Tønnessen, 2009)",
    },
    WeeklyTheme.THRESHOLD: {
        "name": "Lactate Threshold",
        "description": "Sustained effort at race pace intensity",
        "scientific_basis": "Critical Power Theory (Jones et al., 2019)",
    },
    WeeklyTheme.RACE_PREP: {
        "name": "Race Preparation",
        "description": "Full simulations with transitions and pacing strategy",
        "scientific_basis": "Sport-Specific Practice Principle",
    },
    WeeklyTheme.RECOVERY: {
        "name": "Active Recovery",
        "description": "Low-intensity movement for adaptation and regeneration",
        "scientific_basis": "Supercompensation Theory",
    },
    WeeklyTheme.MAX_STRENGTH: {
        "name": "Maximum Strength",
        "description": "Heavy compound lifts at 85-95% 1RM",
        "scientific_basis": "Concurrent Training Model (Coffey & Hawley, 2017)",
    },
    WeeklyTheme.POWER_ENDURANCE: {
        "name": "Power Endurance",
        "description": "Repeated explosive efforts under fatigue",
        "scientific_basis": "Anaerobic Capacity Development",
    },
    WeeklyTheme.TRANSITIONS: {
        "name": "Transition Efficiency",
        "description": "Minimizing time and energy cost between stations",
        "scientific_basis": "Task Switching & Motor Learning",
    },
}

SCIENTIFIC_SOURCES = [
    "Seiler, S. & Tønnessen, E. (2009). Intervals, Thresholds, and Long Slow Distance.",
    "Jones, A.M. et al. (2019). Critical Power: Implications for Determination of VO2max and Exercise Tolerance.",
    "Coffey, V.G. & Hawley, J.A. (2017). Concurrent exercise training: do opposites distract?",
    "Tabata, I. et al. (1996). Effects of moderate-intensity endurance and high-intensity intermittent training.",
    "Buchheit, M. & Laursen, P.B. (2013). High-intensity interval training, solutions to the programming puzzle.",
    "Bompa, T.O. & Haff, G.G. (2009). Periodization: Theory and Methodology of Training.",
    "Verkhoshansky, Y. & Siff, M.C. (2009). Supertraining.",
]

FOCUS_LABELS = {
    "hyrox": "HYROX",
    "crossfit": "CrossFit",
    "general_strength": "General Strength",
    "endurance": "Endurance",
}


def default_studios() -> List[Studio]:
    """Fresh copies of the seed studios; callers may mutate them freely."""
    return [Studio.model_validate(studio) for studio in DEFAULT_STUDIOS]


def session_config(session_type: SessionType | str) -> SessionConfig:
    return SESSION_CONFIGS[SessionType(session_type)]


def theme_info(theme: WeeklyTheme | str) -> Dict[str, str]:
    return WEEKLY_THEMES[WeeklyTheme(theme)]
