"""Built-in demo content used when no LOVE_* overrides are configured."""

from datetime import date

from services.love_config import (
    BucketListSection,
    FeaturedPhoto,
    GateQuestion,
    GateQuestionType,
    GateSection,
    HeroSection,
    HighlightItem,
    LoveConfig,
    LoveLetterSection,
    MemoryEntry,
    RelationshipSection,
    SongItem,
    SongsSection,
)

LOVE_CONTENT = LoveConfig(
    hero=HeroSection(
        title="Unsere Geschichte",
        subtitle="Eine kleine Beispielseite",
        intro="Dies ist ein Beispielinhalt fuer die Demo-Seite.",
        cta="Liebesbrief anzeigen",
        cta_after="Weiterlesen",
        featured_photo=FeaturedPhoto(src="images/roses.jpg", caption="Beispielbild"),
    ),
    relationship=RelationshipSection(
        start_date=date(2024, 2, 2),
        heading="Wie alles begann",
        subheading="Eine kleine Demo-Geschichte.",
        future_title="Naechstes Kapitel",
        future_text="Noch viele gemeinsame Schritte stehen an.",
        show_wheel=True,
        wheel_items=["Erstes Treffen", "Konzertabend", "Roadtrip", "Pizzaabend"],
    ),
    love_letter=LoveLetterSection(
        heading="Ein paar Worte",
        paragraphs=[
            "Dies ist ein Beispielbrief, damit du siehst, wie der Inhalt spaeter aussieht.",
            "In unserer Demo dreht sich vieles um gemeinsame Momente und um Musik.",
            "Passe alles ueber die LOVE_* Umgebungsvariablen an, damit deine eigene Story entsteht.",
        ],
    ),
    gate=GateSection(
        title="Nur fuer uns",
        subtitle="Beantworte die Demo-Fragen.",
        error_message="Noch nicht korrekt. Versuch es erneut.",
        questions=[
            GateQuestion(
                prompt="Wo war unser erstes Date?",
                type=GateQuestionType.MULTIPLE_CHOICE,
                choices=["Im Kino", "Am See", "Im Museum"],
                answer_index=1,
            ),
            GateQuestion(
                prompt="Wie heisst unser Lieblingsgericht?",
                type=GateQuestionType.TEXT,
                answer_text="Pizza",
                is_case_sensitive=False,
            ),
        ],
    ),
    memories=[
        MemoryEntry(title="Erstes Konzert", description="Live im Beispiel-Club.", date="Februar 2024", icon="*"),
        MemoryEntry(title="Pizzaabend", description="Demo-Soundtrack und viel Lachen.", date="Maerz 2024", icon="*"),
        MemoryEntry(title="Sonnenuntergang", description="Beispielspaziergang am Fluss.", date="April 2024", icon="*"),
    ],
    memories_visible=True,
    travel_visible=False,
    gallery=[],
    highlights=[
        HighlightItem(icon="*", title="Lieblingssongs", description="Gemeinsam Musik hoeren und lachen."),
        HighlightItem(icon="*", title="Inside Jokes", description="Kleine Insider, die nur wir verstehen."),
        HighlightItem(icon="*", title="Gemeinsame Ziele", description="Ideen fuer Reisen, Konzerte und mehr."),
    ],
    bucket_list=BucketListSection(
        eyebrow="Demo Todos",
        heading="Was wir noch erleben wollen",
        subheading="Passe die Liste in der App an.",
        items=[],
    ),
    songs=SongsSection(
        eyebrow="Playlist",
        heading="Beispiel-Songs",
        subheading="Diese Liste kannst du per LOVE_SONGS_ITEMS anpassen.",
        items=[
            SongItem(url="https://open.spotify.com/track/demo-song-1", artist="Sample Artist"),
            SongItem(url="https://open.spotify.com/track/demo-song-2", artist="Sample Artist"),
        ],
    ),
)
