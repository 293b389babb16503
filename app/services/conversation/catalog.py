"""
Catálogo de contenido del bot: textos, menús y horarios por ciudad.
Solo datos; la lógica de conversación vive en el engine.
"""

from typing import Dict, List, Optional, Tuple

from app.models.session import ClientStatus, FreeformTopic
from app.shared.whatsapp import WhatsAppButtons, WhatsAppLists, WhatsAppHelper

STUDIO_NAME = "Shunyamudra Yoga & Wellness Center"

GREETING_WORDS = ("hi", "hello", "hey", "namaste", "namasthe")

CONTACT_EXAMPLE = "Example:\n*Name*: Your Name\n*Email*: name@gmail.com"

# ============================================================================
# UBICACIONES
# ============================================================================

OTHER_LOCATION_ID = "other_city"

LOCATIONS: Dict[str, Dict] = {
    "mumbai": {
        "title": "Mumbai",
        "description": "Kharghar, Navi Mumbai",
        "keywords": ("mumbai", "kharghar"),
        "schedule": (
            "🧘‍♀️ *Regular Weekday Batch*:\n\n"
            "Morning Batch\nMonday to Friday\n"
            "6:45 AM - 7:45 AM\n7:45 AM - 8:45 AM\n"
            "8:45 AM - 9:45 AM\n10:30 AM - 11:30 AM\n\n"
            "Evening Batch\n6:30 PM - 7:30 PM\n7:30 PM - 8:30 PM\n\n"
            "🧘‍♀️ *Weekend Batch*:\n\nMorning Batch\nSaturday & Sunday\n7:00 AM - 8:15 AM\n\n"
            "🧘‍♀️ *Aerial Yoga Batch*:\n\nMorning Batch\nSaturday & Sunday\n8:30 AM - 9:45 AM"
        ),
    },
    "bangalore": {
        "title": "Bangalore",
        "description": "Whitefield, Bangalore",
        "keywords": ("bangalore", "bengaluru", "whitefield"),
        "schedule": (
            "🧘‍♀️ *Regular Weekday Batch*:\n\n"
            "Morning Batch\nMonday, Tuesday, Thursday, Friday\n"
            "6:30 AM - 7:30 AM\n8:00 AM - 9:00 AM\n\n"
            "Evening Batch\n7:00 PM - 8:00 PM\n\n"
            "🧘‍♀️ *Meditation Batch*:\n\nMorning Batch\nSaturday only\n8:00 AM - 9:00 AM"
        ),
    },
    "online": {
        "title": "Online",
        "description": "Live classes on Zoom",
        "keywords": ("online", "zoom"),
        "schedule": (
            "🧘‍♀️ *Online Batch*:\n\n"
            "Morning Batch\nMonday, Tuesday, Thursday, Friday\n"
            "9:30 AM - 10:30 AM"
        ),
    },
}

# ============================================================================
# MODALIDADES DE CLASE
# ============================================================================

MODE_STUDIO_ID = "mode_studio"
MODE_PERSONAL_ID = "mode_personal"

CLASS_MODES = {
    MODE_STUDIO_ID: ("studio", "🧘 Studio Batch"),
    MODE_PERSONAL_ID: ("personal", "🙋 Personal Session"),
}

# ============================================================================
# ESTADO DE CLIENTE
# ============================================================================

NEW_CLIENT_ID = "new_client"
EXISTING_CLIENT_ID = "existing_client"

# ============================================================================
# MENÚ PRINCIPAL (ids reconocidos por KeywordIntentDetector)
# ============================================================================

MAIN_MENU_OPTIONS = [
    ("class_schedule", "Class schedule", "Batch timings for your city"),
    ("fee_details", "Fee details", "Our team shares current plans"),
    ("join_class", "Join a class", "Register for a batch"),
    ("request_callback", "Request a callback", "Our team will call you"),
    ("refer_a_friend", "Refer a friend", ""),
    ("raise_concern", "Raise a concern", ""),
    ("feedback", "Provide feedback", ""),
]

# ============================================================================
# TEXTOS
# ============================================================================

GREETING_RETRY = "👋 To get started, please type *Hi*, *Hello*, or *Namaste*."

CONTACT_REQUEST = (
    "🙏 Welcome! Before we begin, could you please share your *Name* and *Email ID*?\n\n"
    + CONTACT_EXAMPLE
)

CONTACT_ERROR = (
    "⚠️ Hmm.. Something isn't right.\n"
    "Please provide your *Name* and *Email ID* correctly.\n\n"
    + CONTACT_EXAMPLE
)

STATUS_RETRY = "⚠️ Please tell us whether you are a *New* or an *Existing* client."
LOCATION_RETRY = "⚠️ Hmm.. Something isn't right.\nPlease select your city from the menu below."
CLASS_MODE_RETRY = "⚠️ Please choose a *Studio Batch* or a *Personal Session*."
MAIN_MENU_RETRY = "⚠️ Hmm.. Something isn't right.\nPlease select your query from the menu below."
CONTINUE_RETRY = "Would you like more assistance?"

CONTINUE_PROMPT = "Do you have more questions?"

FAREWELL = f"Your wellness matters to us. Thanks for getting in touch with {STUDIO_NAME}."

OTHER_LOCATION_REPLY = (
    "🙏 Thank you! We don't have a studio in your city yet, but you can join our *Online* batch.\n"
    "Our team will reach out to you with the details."
)

PERSONAL_SESSION_REPLY = (
    "🙏 Thank you! Your request for a *Personal Session* has been registered. "
    "Our team will contact you shortly to plan it."
)

JOIN_REPLY = (
    "🙏 Thank you so much! Your registration request has been received. "
    "Our team will contact you shortly to complete it."
)

CALLBACK_REPLY = "📞 Sure! Our team will call you back shortly on this number."

FREEFORM_PROMPTS = {
    FreeformTopic.REFERRAL: (
        "🙏 Thank you so much for your referral!\n"
        "Kindly provide the full name, phone number of the person you wish to refer."
    ),
    FreeformTopic.CONCERN: (
        "🙏 Thank you so much for reaching out!\n"
        "You are one of our most valuable customers\n"
        "Kindly provide the concern/complaint you wish to resolve!"
    ),
    FreeformTopic.FEEDBACK: (
        "🙏 Thank you so much for providing your feedback about us!\n"
        "You are one of our most valuable customers\n"
        "Kindly provide the honest feedback!"
    ),
}

FREEFORM_RETRY = {
    FreeformTopic.REFERRAL: "⚠️ Please provide your referral details correctly.",
    FreeformTopic.CONCERN: "⚠️ Please provide your concern/complaint correctly.",
    FreeformTopic.FEEDBACK: "⚠️ Please provide your feedback correctly.",
}

FREEFORM_THANKS = {
    FreeformTopic.REFERRAL: "🙏 Thank you so much! We've received your referral details. Our team will contact them shortly.",
    FreeformTopic.CONCERN: "🙏 Thank you so much! We've received your concern/complaint. Our team is working on it.",
    FreeformTopic.FEEDBACK: "🙏 Thank you so much! We've received your honest feedback. This will help us grow as a community.",
}

BOOK_DEMO_ID = "book_demo"

DEMO_OFFER_PROMPT = (
    "Shall we book a demo class for you to experience our sessions firsthand?\n\n"
    "Or is there anything else we can help you with?"
)

DEMO_BOOKING_REPLY = (
    "🙏 Thank you so much! Your booking request has been registered. "
    "Our team will contact you shortly."
)

REMINDER_TEXTS = {
    "reminder_1": "⏳ We didn't hear from you for a while. Are you still there?",
    "reminder_2": "🙏 Just checking in again. Would you like to pick up where we left off?",
}

REMINDER_PROMPT = "Would you like to continue?"

SESSION_TIMEOUT = (
    "⏳ Your session has timed out.\n\n"
    f"Your wellness matters to us. Thanks for getting in touch with *{STUDIO_NAME}*.\n\n"
    "To restart, please type *Hi* or *Hello*."
)

# ============================================================================
# CONSTRUCTORES DE MENSAJES
# ============================================================================

def _greeting(name: Optional[str]) -> str:
    return f"Hi {name} " if name else ""


def thank_you(name: str) -> str:
    return f"Thank you, *{name}*!"


def client_status_prompt() -> Dict:
    return WhatsAppButtons.create_simple_buttons(
        "🙏 Please tell us whether you are:",
        [(NEW_CLIENT_ID, "🆕 New Client"), (EXISTING_CLIENT_ID, "✅ Existing Client")]
    )


def location_prompt(name: Optional[str], status: Optional[ClientStatus]) -> Dict:
    """Lista de ciudades; el saludo cambia según el cliente sea nuevo o existente."""
    if status == ClientStatus.NEW:
        body = (
            f"🙏 ✨ {_greeting(name)}Welcome to {STUDIO_NAME}!\n\n"
            "Let's begin your journey. Please select your city from below:"
        )
    else:
        body = (
            f"🙏 ✨ {_greeting(name)}Welcome back to {STUDIO_NAME}!\n\n"
            "Please tap your city below:"
        )
    items = [(loc_id, loc["title"], loc["description"]) for loc_id, loc in LOCATIONS.items()]
    items.append((OTHER_LOCATION_ID, "Other", "My city is not listed"))
    return WhatsAppLists.create_simple_list(body, items, section_title="City", header="City")


def class_mode_prompt() -> Dict:
    return WhatsAppButtons.create_simple_buttons(
        "🧘 How would you like to practice with us?",
        [(mode_id, title) for mode_id, (_, title) in CLASS_MODES.items()]
    )


def main_menu_prompt(name: Optional[str], status: Optional[ClientStatus]) -> Dict:
    """Menú principal; la bienvenida depende del tipo de cliente guardado."""
    if status == ClientStatus.EXISTING:
        welcome = f"🙏 ✨ {_greeting(name)}Welcome back to the {STUDIO_NAME} service chatbot!"
    else:
        welcome = f"🙏 ✨ {_greeting(name)}Welcome to {STUDIO_NAME}!"
    body = f"{welcome}\n\nPlease tap one of the options below:"
    return WhatsAppLists.create_simple_list(body, MAIN_MENU_OPTIONS, section_title="Main Menu", header="Main Menu")


def continue_prompt(after_info: bool = False) -> Dict:
    """
    Pregunta Yes/No para seguir. Tras una respuesta informativa se ofrece
    además reservar una clase demo.
    """
    if not after_info:
        return WhatsAppHelper.create_yes_no(CONTINUE_PROMPT)
    return WhatsAppButtons.create_simple_buttons(DEMO_OFFER_PROMPT, [
        (BOOK_DEMO_ID, "📅 Book a demo"),
        (WhatsAppButtons.YES_ID, "❓ More questions"),
        (WhatsAppButtons.NO_ID, "👋 No, thanks"),
    ])


def reminder_prompt() -> Dict:
    return WhatsAppHelper.create_yes_no(REMINDER_PROMPT)


def location_title(location_id: str) -> str:
    if location_id == OTHER_LOCATION_ID:
        return "Other"
    return LOCATIONS[location_id]["title"]


def schedule_for(location_id: Optional[str]) -> str:
    """Horarios de la ciudad guardada, o todos si no hay ciudad conocida."""
    if location_id in LOCATIONS:
        return LOCATIONS[location_id]["schedule"]
    return "\n\n".join(f"📍 *{loc['title']}*\n{loc['schedule']}" for loc in LOCATIONS.values())


def fees_for(location_id: Optional[str]) -> str:
    """Las tarifas no se publican en el chat; el equipo las envía tras el aviso."""
    if location_id in LOCATIONS:
        place = LOCATIONS[location_id]["title"]
        return (
            f"💰 Fee plans for *{place}* depend on the batch you choose.\n"
            "Our team will share the current fee details with you shortly."
        )
    places = " and ".join(loc["description"] for loc_id, loc in LOCATIONS.items() if loc_id != "online")
    return (
        f"🧘 We are located in {places}, and we also run *Online* batches.\n"
        "Our team will share the current fee details with you shortly."
    )


def location_ids() -> List[str]:
    return list(LOCATIONS)


def location_keywords(location_id: str) -> Tuple[str, ...]:
    if location_id == OTHER_LOCATION_ID:
        return ("other", "not listed")
    return LOCATIONS[location_id]["keywords"]


def class_mode_keywords(mode_id: str) -> Tuple[str, ...]:
    if mode_id == MODE_PERSONAL_ID:
        return ("personal", "private", "one on one")
    return ("studio", "batch", "group")
