"""Static reading content: articles and the recovery benefits timeline.

Both catalogs are read-only at runtime. Article slugs are the stable keys
stored in article completions; never rename one that has shipped.
"""

from __future__ import annotations

ARTICLE_CATEGORIES: dict[str, str] = {
    "science": "Science & Research",
    "success": "Success Stories",
    "mental_health": "Mental Health",
    "relationships": "Relationships",
    "lifestyle": "Lifestyle",
}

ARTICLES: list[dict] = [
    {
        "slug": "dopamine-reset-the-science",
        "title": "Dopamine Reset: The Science",
        "subtitle": "Understanding reward pathways and healing",
        "category": "science",
        "read_minutes": 7,
        "introduction": (
            "The brain's reward system plays a crucial role in addiction and recovery. Understanding "
            "how dopamine works can help you better navigate your recovery journey."
        ),
        "sections": [
            {
                "title": "What is Dopamine?",
                "content": (
                    "Dopamine is a neurotransmitter that plays a key role in how we experience pleasure and "
                    "motivation. It is released when we engage in activities that our brain associates with "
                    "survival and well-being."
                ),
            },
            {
                "title": "How Addiction Affects Dopamine",
                "content": (
                    "Overstimulation leads to decreased sensitivity. Natural rewards become less satisfying, "
                    "and the brain requires more stimulation for the same effect."
                ),
            },
            {
                "title": "The Reset Process",
                "content": (
                    "1. Initial withdrawal period (7-14 days)\n"
                    "2. Gradual sensitivity improvement (30-60 days)\n"
                    "3. Return to normal function (90+ days)"
                ),
            },
        ],
        "conclusion": (
            "Healing is a process, and your brain has an amazing ability to repair and reset itself."
        ),
    },
    {
        "slug": "from-rock-bottom-to-recovery",
        "title": "From Rock Bottom to Recovery",
        "subtitle": "Finding strength in vulnerability",
        "category": "success",
        "read_minutes": 6,
        "introduction": (
            "Sometimes we need to hit rock bottom before we can begin to rise. This is a story of "
            "finding strength in the darkest moments."
        ),
        "sections": [
            {
                "title": "Hitting Rock Bottom",
                "content": (
                    "Isolation, failing relationships and slipping work performance made it impossible to "
                    "ignore the problem any longer."
                ),
            },
            {
                "title": "Finding Help",
                "content": (
                    "Admitting the struggle to a trusted friend, joining a support group and tracking every "
                    "day of progress turned intention into routine."
                ),
            },
        ],
        "conclusion": "Rock bottom became the solid foundation on which a new life was built.",
    },
    {
        "slug": "mindfulness-in-recovery",
        "title": "Mindfulness in Recovery",
        "subtitle": "Using meditation to overcome urges",
        "category": "mental_health",
        "read_minutes": 4,
        "introduction": (
            "Mindfulness offers practical techniques to manage urges and improve mental well-being."
        ),
        "sections": [
            {
                "title": "Understanding Mindfulness",
                "content": (
                    "Being present without judgment means observing urges without acting on them and "
                    "staying present during difficult moments."
                ),
            },
            {
                "title": "Practical Techniques",
                "content": (
                    "1. Urge Surfing: observe urges like waves that rise and fall\n"
                    "2. Body Scan: practice full-body awareness\n"
                    "3. Mindful Breathing: focus on breath to center yourself\n"
                    "4. STOP: Stop, Take a step back, Observe, Proceed mindfully"
                ),
            },
        ],
        "conclusion": (
            "Regular practice provides practical tools to manage urges and reduce stress."
        ),
    },
    {
        "slug": "rebuilding-trust",
        "title": "Rebuilding Trust",
        "subtitle": "Repairing relationships during recovery",
        "category": "relationships",
        "read_minutes": 5,
        "introduction": (
            "Recovery affects the people close to you. Rebuilding trust takes honesty, patience and "
            "consistent action."
        ),
        "sections": [
            {
                "title": "Honest Communication",
                "content": (
                    "Share your progress and setbacks openly, and listen without getting defensive."
                ),
            },
            {
                "title": "Consistency Over Time",
                "content": "Trust is rebuilt through small promises kept every single day.",
            },
        ],
        "conclusion": None,
    },
    {
        "slug": "sleep-and-recovery",
        "title": "Sleep and Recovery",
        "subtitle": "Why rest strengthens your resolve",
        "category": "lifestyle",
        "read_minutes": 4,
        "introduction": (
            "Poor sleep weakens self-control. Improving sleep quality is one of the simplest ways to "
            "support your recovery."
        ),
        "sections": [
            {
                "title": "Evening Routine",
                "content": (
                    "1. Avoid screens 1 hour before bed\n"
                    "2. Practice relaxation techniques\n"
                    "3. Limit caffeine and alcohol\n"
                    "4. Journal or read before sleep"
                ),
            },
        ],
        "conclusion": (
            "Better sleep leads to stronger recovery. Implement these changes gradually for lasting "
            "improvement."
        ),
    },
]

_ARTICLES_BY_SLUG = {article["slug"]: article for article in ARTICLES}

BENEFITS: list[dict] = [
    {
        "day": 1,
        "title": "Neural Adaptation Begins",
        "description": (
            "Dopamine receptor sensitivity starts improving within 24 hours of abstinence, beginning "
            "the brain's healing process."
        ),
    },
    {
        "day": 7,
        "title": "Dopamine Rebalancing",
        "description": (
            "Cravings reduce noticeably and dopamine receptor upregulation starts after one week."
        ),
    },
    {
        "day": 14,
        "title": "Cognitive Enhancement",
        "description": "Working memory and attention span improve after two weeks.",
    },
    {
        "day": 30,
        "title": "Brain Plasticity",
        "description": (
            "Neuroplastic changes reduce cue reactivity and improve prefrontal cortex function."
        ),
    },
    {
        "day": 45,
        "title": "Emotional Intelligence",
        "description": "Emotional awareness and empathy grow, improving communication.",
    },
    {
        "day": 60,
        "title": "Peak Performance",
        "description": "Optimal brain function, increased confidence and overall well-being.",
    },
    {
        "day": 90,
        "title": "Full Reset",
        "description": (
            "Dopamine sensitivity is restored and brain activity patterns normalize after 90 days."
        ),
    },
]


def get_article(slug: str) -> dict | None:
    """Look up an article by slug."""
    return _ARTICLES_BY_SLUG.get(slug)


def benefits_timeline(days: int) -> list[dict]:
    """Benefits annotated with whether the given streak has unlocked them."""
    return [{**benefit, "unlocked": days >= benefit["day"]} for benefit in BENEFITS]


def next_benefit(days: int) -> dict | None:
    """The first benefit still ahead of the given streak."""
    for benefit in BENEFITS:
        if days < benefit["day"]:
            return benefit
    return None
