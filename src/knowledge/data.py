"""
Демо-база знаний виджета: продукты оптики Bezeq, приветствия,
сбор лидов и общие вопросительные слова.

Таблицу удобно править руками — порядок записей важен для тай-брейка.
"""

from typing import FrozenSet, List

from .base import KnowledgeBase, KnowledgeEntry


_BE_FIBER_ANSWER = (
    "נתב Be Fiber הוא הראוטר המתקדם של בזק לסיבים אופטיים, בתקן WiFi6, "
    "ומאפשר חיבור של עד 128 מכשירים במקביל."
)

_LEAD_CONTACT_ANSWER = (
    "אוקיי תוכל להגיד לי בבקשה את שמך ומספר הטלפון שלך ואעביר את הפרטים?"
)


DEFAULT_ENTRIES: List[KnowledgeEntry] = [
    # =========================================================================
    # ПРИВЕТСТВИЯ
    # =========================================================================
    KnowledgeEntry(
        keyword="שלום",
        answer="שלום וברכה! איך אוכל לעזור לך היום?",
        voice_url="/voice/shalom_greeting.wav",
        confidence=0.95,
        tags=("greeting", "hello"),
    ),
    KnowledgeEntry(
        keyword="הי",
        answer="היי! שמח לראות אותך. מה השאלה שלך?",
        voice_url="/voice/hi_greeting.wav",
        confidence=0.95,
        tags=("greeting", "casual"),
    ),
    KnowledgeEntry(
        keyword="בוקר טוב",
        answer="בוקר טוב! איזה יום יפה היום. במה אוכל לעזור?",
        voice_url="/voice/good_morning.wav",
        confidence=0.95,
        tags=("greeting", "morning"),
    ),

    # =========================================================================
    # ТЕХНОЛОГИИ / ПРОДУКТЫ
    # =========================================================================
    KnowledgeEntry(
        keyword="סיבים",
        answer=(
            "אינטרנט סיבים מבטיח מהירות גלישה גבוהה במיוחד, יציבות ושימוש חלק "
            "לשיחות וידאו, סטרימינג וגיימינג."
        ),
        voice_url="/voice/fiber_internet.wav",
        confidence=0.95,
        tags=("internet", "fiber", "speed"),
    ),
    KnowledgeEntry(
        keyword="Be Fiber",
        answer=_BE_FIBER_ANSWER,
        voice_url="/voice/be_fiber_router.wav",
        confidence=0.95,
        tags=("router", "wifi6", "bezeq"),
    ),
    KnowledgeEntry(
        keyword="פייבר",
        answer=_BE_FIBER_ANSWER,
        voice_url="/voice/be_fiber_router.wav",
        confidence=0.95,
        tags=("router", "wifi6", "bezeq"),
    ),
    KnowledgeEntry(
        keyword="גיימינג",
        answer=(
            "נתב Be Fiber מותאם לגיימינג עם חיבור יציב וללא לאגים, כדי שתוכלו "
            "ליהנות ממשחקי רשת חלקים ומהירים."
        ),
        voice_url="/voice/gaming_response.wav",
        confidence=0.9,
        tags=("gaming", "low-latency", "performance"),
    ),
    KnowledgeEntry(
        keyword="Mesh",
        answer=(
            "עם נתב Be Fiber ומשפר הגלישה Mesh Fiber תוכלו ליהנות מרשת WiFi "
            "רציפה בכל הבית, בלי לעבור בין רשתות שונות."
        ),
        voice_url="/voice/mesh_response.wav",
        confidence=0.9,
        tags=("mesh", "wifi", "coverage"),
    ),
    KnowledgeEntry(
        keyword="אבטחה",
        answer=(
            "הראוטר כולל הגנת סייבר מתקדמת, שחוסמת איומים ופריצות בזמן אמת "
            "ושומרת על הגולשים בבית."
        ),
        voice_url="/voice/security_response.wav",
        confidence=0.9,
        tags=("security", "cyber", "protection"),
    ),
    KnowledgeEntry(
        keyword="עבודה מהבית",
        answer=(
            "עם אינטרנט סיבים ונתב Be Fiber ניתן לעבוד מהבית בנוחות, לנהל שיחות "
            "זום באיכות גבוהה וללא הפרעות."
        ),
        voice_url="/voice/work_from_home.wav",
        confidence=0.9,
        tags=("remote-work", "zoom", "stability"),
    ),
    KnowledgeEntry(
        keyword="סטרימינג",
        answer=(
            "Be Fiber מאפשר צפייה ישירה בנטפליקס ויוטיוב באיכות 8K, ללא "
            "Buffering או הפרעות."
        ),
        voice_url="/voice/streaming_response.wav",
        confidence=0.9,
        tags=("streaming", "video", "entertainment"),
    ),
    KnowledgeEntry(
        keyword="Full Fiber",
        answer=(
            "חבילת Full Fiber כוללת את הראוטר Be Fiber ומשפר הגלישה Mesh Fiber, "
            "לחוויית אינטרנט עוצמתית בכל הבית."
        ),
        voice_url="/voice/full_fiber_bundle.wav",
        confidence=0.9,
        tags=("bundle", "full-fiber", "offer"),
    ),

    # =========================================================================
    # ЛИДЫ
    # =========================================================================
    KnowledgeEntry(
        keyword="פנייה",
        answer=_LEAD_CONTACT_ANSWER,
        voice_url="/voice/lead_contact_request.wav",
        confidence=0.9,
        tags=("lead", "contact", "phone"),
    ),
    KnowledgeEntry(
        keyword="פניה",
        answer=_LEAD_CONTACT_ANSWER,
        voice_url="/voice/lead_contact_request.wav",
        confidence=0.9,
        tags=("lead", "contact", "phone"),
    ),
    KnowledgeEntry(
        keyword="05",  # префикс мобильного номера
        answer="תודה אדאג שיחזרו אלייך",
        voice_url="/voice/lead_confirmation.wav",
        confidence=0.8,
        tags=("lead", "confirmation", "phone"),
    ),

    # =========================================================================
    # ОБЩИЕ СЛОВА (страховка, см. DEFAULT_FUNCTION_WORDS)
    # =========================================================================
    KnowledgeEntry(
        keyword="על",
        answer="על מה תרצה לשמוע? אני יכול לעזור עם מידע על טכנולוגיה, אוכל, טיולים ועוד.",
        confidence=0.5,
        tags=("preposition", "general"),
    ),
    KnowledgeEntry(
        keyword="רוצה",
        answer="מה תרצה לדעת? אני כאן לעזור!",
        confidence=0.6,
        tags=("want", "general"),
    ),
    KnowledgeEntry(
        keyword="לדעת",
        answer="אני אשמח לעזור לך לדעת יותר! על מה אתה סקרן?",
        confidence=0.6,
        tags=("know", "general"),
    ),
    KnowledgeEntry(
        keyword="מה",
        answer=(
            "זו שאלה מעניינת! אני כאן לעזור עם מידע על טכנולוגיה, אוכל, טיולים, "
            "בריאות ועוד. תוכל לשאול יותר ספציפית?"
        ),
        confidence=0.6,
        tags=("question", "general"),
    ),
    KnowledgeEntry(
        keyword="איך",
        answer=(
            "אני אשמח להסביר איך לעשות דברים שונים! תוכל לשאול איך לבשל משהו, "
            "איך ללמוד דבר חדש, או איך לתכנן טיול?"
        ),
        confidence=0.65,
        tags=("how-to", "general"),
    ),
    KnowledgeEntry(
        keyword="למה",
        answer='זו שאלה פילוסופית! אני אוהב לחקור את ה"למה" של דברים. על מה אתה סקרן?',
        confidence=0.6,
        tags=("why", "philosophical"),
    ),
]


# Предлоги, общие глаголы и вопросительные слова — их score делится пополам
DEFAULT_FUNCTION_WORDS: FrozenSet[str] = frozenset(
    ["על", "רוצה", "לדעת", "מה", "איך", "למה"]
)


def build_default_knowledge() -> KnowledgeBase:
    """Новая копия демо-базы (у каждого матчера — своя)"""
    return KnowledgeBase(DEFAULT_ENTRIES)
