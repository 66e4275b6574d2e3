DEFAULT_CATEGORIES = [
    {"value": "memories", "label": "Amintiri", "emoji": "💭"},
    {"value": "milestones", "label": "Etape importante", "emoji": "🎯"},
    {"value": "everyday", "label": "Zilnic", "emoji": "☀️"},
    {"value": "special", "label": "Special", "emoji": "✨"},
    {"value": "family", "label": "Familie", "emoji": "👨‍👩‍👧‍👦"},
    {"value": "play", "label": "Joacă", "emoji": "🎮"},
    {"value": "learning", "label": "Învățare", "emoji": "📚"},
]

# cannot be deleted by editors
ESSENTIAL_CATEGORIES = {"memories", "family"}

DEFAULT_CATEGORY_EMOJI = "📝"


def _skills(start, names):
    return [{"id": f"skill_{start + i}", "name": name} for i, name in enumerate(names)]


SKILL_CATEGORIES = {
    "physical": {
        "name": "Physical Skills",
        "skills": _skills(1, [
            "Gross Motor Skills", "Fine Motor Skills", "Balance and Coordination",
            "Running and Jumping", "Hand-Eye Coordination",
        ]),
    },
    "cognitive": {
        "name": "Cognitive Skills",
        "skills": _skills(6, [
            "Memory and Recall", "Problem Solving", "Logical Thinking",
            "Attention and Focus", "Math Concepts",
        ]),
    },
    "language": {
        "name": "Language & Communication",
        "skills": _skills(11, [
            "Verbal Communication", "Reading", "Writing",
            "Listening", "Vocabulary",
        ]),
    },
    "social": {
        "name": "Social & Emotional",
        "skills": _skills(16, [
            "Sharing and Cooperation", "Empathy", "Emotional Regulation",
            "Making Friends", "Conflict Resolution",
        ]),
    },
    "selfcare": {
        "name": "Self-Care & Independence",
        "skills": _skills(21, [
            "Personal Hygiene", "Dressing", "Independent Eating",
            "Time Management", "Responsibility and Chores",
        ]),
    },
    "creative": {
        "name": "Creative & Expressive",
        "skills": _skills(26, [
            "Drawing and Painting", "Music and Rhythm", "Dance and Movement",
            "Imaginative Play", "Storytelling",
        ]),
    },
    "digital": {
        "name": "Digital & Modern Skills",
        "skills": _skills(31, [
            "Basic Computer Skills", "Digital Safety", "Educational Apps",
            "Technology Awareness", "Online Learning",
        ]),
    },
}


def find_catalog_skill(skill_id: str):
    """Returns (category_key, skill) or (None, None)."""
    for key, category in SKILL_CATEGORIES.items():
        for skill in category["skills"]:
            if skill["id"] == skill_id:
                return key, skill
    return None, None
