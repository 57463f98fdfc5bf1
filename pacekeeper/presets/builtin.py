"""Built-in preset data, used when no theme file can be read."""

from __future__ import annotations

DEFAULT_DAILY_PRESETS: list[dict] = [
    {
        "name": "Pour-over coffee (4 min)",
        "steps": [
            {"name": "Bloom", "seconds": 30},
            {"name": "First pour", "seconds": 60},
            {"name": "Second pour", "seconds": 60},
            {"name": "Third pour", "seconds": 60},
            {"name": "Drawdown", "seconds": 30},
        ],
    },
    {
        "name": "Warm-up routine (5 min)",
        "steps": [
            {"name": "Neck and shoulders", "seconds": 60},
            {"name": "Arm circles", "seconds": 60},
            {"name": "Waist twists", "seconds": 60},
            {"name": "Hip mobility", "seconds": 60},
            {"name": "Knees and ankles", "seconds": 60},
        ],
    },
    {
        "name": "Pull-ups (5 sets, work + rest)",
        "steps": [
            {"name": "Set 1", "seconds": 30},
            {"name": "Rest", "seconds": 60},
            {"name": "Set 2", "seconds": 30},
            {"name": "Rest", "seconds": 60},
            {"name": "Set 3", "seconds": 30},
            {"name": "Rest", "seconds": 60},
            {"name": "Set 4", "seconds": 30},
            {"name": "Rest", "seconds": 60},
            {"name": "Set 5", "seconds": 30},
        ],
    },
    {
        "name": "Jump rope (8 intervals)",
        "steps": [
            {"name": "Jump", "seconds": 45},
            {"name": "Rest", "seconds": 30},
            {"name": "Jump", "seconds": 45},
            {"name": "Rest", "seconds": 30},
            {"name": "Jump", "seconds": 45},
            {"name": "Rest", "seconds": 30},
            {"name": "Jump", "seconds": 45},
            {"name": "Rest", "seconds": 30},
        ],
    },
    {
        "name": "Desk tidy (10 min)",
        "steps": [
            {"name": "Sort desk items", "seconds": 240},
            {"name": "Wipe desk and devices", "seconds": 180},
            {"name": "Put things away", "seconds": 180},
        ],
    },
    {
        "name": "Focus block (20 min)",
        "steps": [
            {"name": "Deep work", "seconds": 1200},
        ],
    },
    {
        "name": "Reading session (20 min)",
        "steps": [
            {"name": "Set up reading space", "seconds": 60},
            {"name": "Read", "seconds": 1020},
            {"name": "Summary and notes", "seconds": 120},
        ],
    },
    {
        "name": "Breathing break (5 min)",
        "steps": [
            {"name": "Settle posture and breath", "seconds": 60},
            {"name": "Paced breathing: in 4, out 6", "seconds": 180},
            {"name": "Slow stretch", "seconds": 60},
        ],
    },
    {
        "name": "Morning start (15 min)",
        "steps": [
            {"name": "Open a window, drink water", "seconds": 180},
            {"name": "Wake-up stretches", "seconds": 360},
            {"name": "List today's top three", "seconds": 360},
        ],
    },
    {
        "name": "House round (30 min)",
        "steps": [
            {"name": "Living space", "seconds": 600},
            {"name": "Kitchen and table", "seconds": 600},
            {"name": "Bathroom and floors", "seconds": 600},
        ],
    },
    {
        "name": "Project sprint (45 min)",
        "steps": [
            {"name": "Confirm goals", "seconds": 300},
            {"name": "Execute", "seconds": 2100},
            {"name": "Wrap up notes", "seconds": 180},
            {"name": "Stretch break", "seconds": 120},
        ],
    },
    {
        "name": "Study block (60 min)",
        "steps": [
            {"name": "Review and warm-up reading", "seconds": 600},
            {"name": "Deep study / practice", "seconds": 2400},
            {"name": "Key points and reflection", "seconds": 600},
        ],
    },
]

DEFAULT_TEA_PRESETS: list[dict] = [
    {
        "name": "Tea: everyday green",
        "steps": [
            {"name": "Warm the pot and cups", "seconds": 45},
            {"name": "Add leaves", "seconds": 30},
            {"name": "First infusion", "seconds": 60},
            {"name": "Pour out", "seconds": 30},
            {"name": "Second infusion", "seconds": 45},
            {"name": "Serve", "seconds": 45},
        ],
    },
    {
        "name": "Tea: high-mountain oolong",
        "steps": [
            {"name": "Warm the pot and cups", "seconds": 60},
            {"name": "Add leaves and shake", "seconds": 45},
            {"name": "Quick rinse", "seconds": 25},
            {"name": "Second infusion", "seconds": 50},
            {"name": "Aroma and tasting", "seconds": 60},
            {"name": "Third infusion", "seconds": 55},
            {"name": "Share", "seconds": 60},
        ],
    },
    {
        "name": "Tea: black (Assam)",
        "steps": [
            {"name": "Warm the pot and pitcher", "seconds": 40},
            {"name": "Add leaves", "seconds": 35},
            {"name": "First infusion", "seconds": 75},
            {"name": "Serve", "seconds": 45},
            {"name": "Second infusion", "seconds": 90},
            {"name": "Third infusion, lid on", "seconds": 110},
        ],
    },
    {
        "name": "Tea: ripe pu-erh",
        "steps": [
            {"name": "Warm the cups", "seconds": 50},
            {"name": "Wake the leaves", "seconds": 40},
            {"name": "Rinse (discard)", "seconds": 20},
            {"name": "First infusion", "seconds": 45},
            {"name": "Second infusion", "seconds": 60},
            {"name": "Third infusion", "seconds": 75},
            {"name": "Fourth infusion", "seconds": 90},
        ],
    },
    {
        "name": "Tea: jasmine",
        "steps": [
            {"name": "Warm the pot and cups", "seconds": 45},
            {"name": "Add leaves", "seconds": 30},
            {"name": "First infusion", "seconds": 50},
            {"name": "Pour out", "seconds": 35},
            {"name": "Second infusion", "seconds": 55},
            {"name": "Third infusion", "seconds": 65},
        ],
    },
    {
        "name": "Tea: tea bag, quick",
        "steps": [
            {"name": "Hot water and tea bag", "seconds": 30},
            {"name": "Warm the cup", "seconds": 45},
            {"name": "Steep", "seconds": 120},
            {"name": "Press and remove bag", "seconds": 30},
            {"name": "Season and stir", "seconds": 45},
        ],
    },
]

DEFAULT_PRESET_DATA: list[dict] = [*DEFAULT_DAILY_PRESETS, *DEFAULT_TEA_PRESETS]

DEFAULT_THEME_CONFIG: dict = {
    "defaultThemeId": "default",
    "themes": [
        {
            "id": "default",
            "name": "Daily routines and tea",
            "description": "Built-in: exercise, drinks and everyday routines",
            "usage": "General pacing and beginner tea brewing",
            "presets": DEFAULT_PRESET_DATA,
            "fallback": True,
        }
    ],
}
