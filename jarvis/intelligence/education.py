from __future__ import annotations

import random

EDUCATION_NOTE = (
    "\n\n*Note: This is general health information. "
    "For personalized advice, please consult with a healthcare provider.*"
)

_EDUCATION_TOPICS: dict[str, tuple[str, ...]] = {
    "general": (
        "**General Health Tips**:\n\n"
        "- Aim for at least 150 minutes of moderate exercise weekly\n"
        "- Stay hydrated by drinking 6-8 glasses of water daily\n"
        "- Get 7-9 hours of sleep each night\n"
        "- Eat a balanced diet rich in fruits, vegetables, whole grains, and lean proteins\n"
        "- Practice stress management through techniques like meditation or deep breathing\n"
        "- Schedule regular check-ups with your healthcare provider",
        "**Preventive Health Measures**:\n\n"
        "- Wash hands frequently to prevent infection\n"
        "- Stay up to date on recommended vaccinations\n"
        "- Use sun protection to prevent skin damage\n"
        "- Maintain a healthy weight through diet and exercise\n"
        "- Limit alcohol consumption and avoid tobacco products\n"
        "- Practice safe behaviors to prevent injuries",
    ),
    "nutrition": (
        "**Nutrition Fundamentals**:\n\n"
        "- Focus on whole, unprocessed foods\n"
        "- Include a variety of colorful fruits and vegetables daily\n"
        "- Choose whole grains over refined grains\n"
        "- Include healthy protein sources like beans, nuts, fish, and lean meats\n"
        "- Limit added sugars, salt, and unhealthy fats\n"
        "- Stay hydrated primarily with water",
        "**Balanced Diet Guidelines**:\n\n"
        "- Fill half your plate with fruits and vegetables\n"
        "- Make at least half your grains whole grains\n"
        "- Vary your protein sources throughout the week\n"
        "- Include calcium-rich foods like dairy or fortified plant alternatives\n"
        "- Limit highly processed foods and sugary beverages\n"
        "- Be mindful of portion sizes",
    ),
    "exercise": (
        "**Physical Activity Guidelines**:\n\n"
        "- Aim for at least 150 minutes of moderate-intensity exercise weekly\n"
        "- Include muscle-strengthening activities at least twice weekly\n"
        "- Break up sedentary time with short activity breaks\n"
        "- Find activities you enjoy to increase sustainability\n"
        "- Start slowly and gradually increase intensity if you're new to exercise\n"
        "- Include flexibility and balance exercises, especially as you age",
        "**Exercise Benefits**:\n\n"
        "- Reduces risk of heart disease, stroke, and type 2 diabetes\n"
        "- Helps maintain healthy weight\n"
        "- Strengthens bones and muscles\n"
        "- Improves mental health and mood\n"
        "- Increases energy and improves sleep quality\n"
        "- Enhances cognitive function",
    ),
    "stress": (
        "**Stress Management Techniques**:\n\n"
        "- Practice deep breathing exercises daily\n"
        "- Try progressive muscle relaxation\n"
        "- Engage in regular physical activity\n"
        "- Maintain social connections\n"
        "- Consider mindfulness meditation\n"
        "- Ensure adequate sleep and nutrition",
        "**Managing Chronic Stress**:\n\n"
        "- Identify and address sources of stress when possible\n"
        "- Set realistic goals and priorities\n"
        "- Take breaks and make time for activities you enjoy\n"
        "- Limit exposure to stressful media when possible\n"
        "- Consider keeping a stress journal to identify patterns\n"
        "- Seek professional help if stress becomes overwhelming",
    ),
    "sleep": (
        "**Sleep Hygiene Tips**:\n\n"
        "- Maintain a consistent sleep schedule\n"
        "- Create a restful environment (cool, dark, quiet room)\n"
        "- Limit screen time before bed\n"
        "- Avoid caffeine, alcohol, and large meals close to bedtime\n"
        "- Regular physical activity can promote better sleep\n"
        "- Develop a relaxing bedtime routine",
        "**Importance of Quality Sleep**:\n\n"
        "- Supports immune function\n"
        "- Enhances cognitive performance and memory\n"
        "- Regulates mood and emotional well-being\n"
        "- Helps maintain healthy weight\n"
        "- Reduces risk of chronic conditions like heart disease and diabetes\n"
        "- Supports overall health and longevity",
    ),
    "mental": (
        "**Mental Health Basics**:\n\n"
        "- Practice self-care regularly\n"
        "- Maintain social connections\n"
        "- Set healthy boundaries\n"
        "- Recognize when to seek professional help\n"
        "- Understand that mental health is as important as physical health\n"
        "- Practice mindfulness and being present",
        "**Mental Wellness Strategies**:\n\n"
        "- Develop healthy coping mechanisms for stress\n"
        "- Get regular physical activity\n"
        "- Prioritize adequate sleep\n"
        "- Limit alcohol and avoid recreational drugs\n"
        "- Express feelings in healthy ways\n"
        "- Seek professional help when needed",
    ),
}

_EDUCATION_TOPIC_HINTS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("nutrition", ("food", "diet", "nutri")),
    ("exercise", ("exercise", "fitness", "workout")),
    ("stress", ("stress", "anxiety", "relax")),
    ("sleep", ("sleep", "insomnia", "rest")),
    ("mental", ("mental", "depression", "mood")),
)

_FALLBACK_CATEGORIES: tuple[tuple[str, frozenset[str], tuple[str, ...]], ...] = (
    (
        "symptoms",
        frozenset({"symptom", "feel", "pain", "ache", "sore", "hurt", "discomfort", "sick"}),
        (
            "I understand you're experiencing some symptoms. While I can provide general "
            "information, it's important to consult with a healthcare provider for a proper "
            "evaluation, especially if symptoms persist or worsen.",
            "Symptoms can have many different causes. If you're concerned about what you're "
            "experiencing, I'd recommend reaching out to a healthcare professional who can "
            "assess your specific situation.",
        ),
    ),
    (
        "headache",
        frozenset({"headache", "migraine"}),
        (
            "Headaches have many causes ranging from tension to serious conditions. Rest, "
            "hydration, and over-the-counter pain relievers may help with occasional headaches. "
            "For severe, sudden, or unusual headaches, consult a healthcare provider.",
            "Migraines and recurring headaches might benefit from identifying and avoiding "
            "triggers like certain foods, stress, or sleep disruption. A healthcare provider can "
            "offer guidance on prevention and treatment options.",
        ),
    ),
    (
        "medication",
        frozenset({"medicine", "medication", "drug", "dose", "pill", "prescription"}),
        (
            "Medication questions should typically be directed to your healthcare provider or "
            "pharmacist. Always take medications as prescribed and be aware of potential side "
            "effects or interactions.",
            "For questions about specific medications, dosages, or potential side effects, it's "
            "best to consult your healthcare provider or pharmacist who can provide personalized "
            "guidance.",
        ),
    ),
    (
        "prevention",
        frozenset({"prevent", "avoid", "risk", "healthy", "exercise", "diet", "lifestyle"}),
        (
            "Preventive healthcare involves regular check-ups, a balanced diet, regular physical "
            "activity, adequate sleep, and stress management. These foundations can help reduce "
            "risk for many common health conditions.",
            "For disease prevention, consider factors like balanced nutrition, regular physical "
            "activity, adequate sleep, stress management, and avoiding tobacco and excessive "
            "alcohol. Regular health screenings are also important.",
        ),
    ),
    (
        "sleep",
        frozenset({"sleep", "insomnia", "tired", "fatigue", "rest", "exhaustion"}),
        (
            "Sleep problems can significantly impact health. Aim for 7-9 hours of quality sleep "
            "by maintaining a consistent schedule, creating a comfortable sleep environment, and "
            "limiting screen time before bed.",
            "Insomnia and sleep disturbances may be caused by stress, medical conditions, or "
            "lifestyle factors. Consider relaxation techniques, limiting caffeine, and consulting "
            "a healthcare provider if sleep issues persist.",
        ),
    ),
    (
        "mental_health",
        frozenset(
            {"anxiety", "depression", "stress", "mental", "mood", "therapy", "counseling", "psychiatric"}
        ),
        (
            "Mental health is an essential component of overall wellbeing. If you're experiencing "
            "persistent feelings of anxiety, depression, or other mental health concerns, consider "
            "reaching out to a mental health professional.",
            "Stress management techniques include regular exercise, mindfulness practices, "
            "adequate sleep, social connection, and possibly counseling or therapy. Many people "
            "benefit from professional support for mental health concerns.",
        ),
    ),
    (
        "nutrition",
        frozenset({"nutrition", "diet", "food", "eating", "weight", "calories", "carbs", "protein", "fat"}),
        (
            "A balanced diet typically includes plenty of fruits and vegetables, whole grains, lean "
            "proteins, and healthy fats. Nutritional needs vary by individual, so consulting with a "
            "dietitian can provide personalized guidance.",
            "Healthy eating involves moderation, variety, and balance. Focus on whole foods, "
            "appropriate portion sizes, and mindful eating habits. Specific dietary "
            "recommendations may depend on your individual health needs.",
        ),
    ),
)

_GENERAL_FALLBACK_REPLIES = (
    "I'm here to provide general health information. While I aim to be helpful, remember that "
    "personalized medical advice should come from healthcare professionals who know your "
    "specific situation.",
    "Thank you for your health question. I can offer general information, but for specific "
    "medical concerns, it's best to consult with a healthcare provider for personalized advice.",
    "Health topics require individualized attention. While I can share general health "
    "information, your healthcare provider can offer guidance tailored to your specific needs "
    "and medical history.",
    "I'm happy to discuss general health topics, but remember that this information isn't a "
    "substitute for professional medical advice. Regular check-ups with healthcare providers are "
    "essential for optimal health.",
    "For general health maintenance, consider regular physical activity, a balanced diet, "
    "adequate sleep, stress management, and routine preventive care with your healthcare "
    "provider.",
)


def select_education_topic(text: str) -> str:
    normalized = text.lower()
    for topic, hints in _EDUCATION_TOPIC_HINTS:
        if any(hint in normalized for hint in hints):
            return topic
    return "general"


def health_education_message(text: str, *, rng: random.Random | None = None) -> str:
    chooser = rng or random
    messages = _EDUCATION_TOPICS[select_education_topic(text)]
    return chooser.choice(messages) + EDUCATION_NOTE


def medical_fallback_reply(message: str) -> str:
    """Keyword-based reply used when the upstream model cannot answer.

    Variant selection is ``len(message) % n`` so the same message always gets
    the same fallback text.
    """
    keywords = {word.strip(".,!?;:") for word in message.lower().split()}
    for _category, category_keywords, replies in _FALLBACK_CATEGORIES:
        if keywords & category_keywords:
            return replies[len(message) % len(replies)]
    return _GENERAL_FALLBACK_REPLIES[len(message) % len(_GENERAL_FALLBACK_REPLIES)]
