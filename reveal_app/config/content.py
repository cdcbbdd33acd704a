"""
Narrative content for every step.

All user-facing text lives here so a deployment can replace it through
``content.yaml`` without touching the engine.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class NarrativeItem:
    """One item of the cinematic intro."""
    kind: str                                        # "text" or "emoji"
    content: str
    delay_ms: int


@dataclass(frozen=True)
class QuizOption:
    emoji: str
    text: str


@dataclass(frozen=True)
class QuizQuestion:
    question: str
    options: tuple[QuizOption, ...]


@dataclass(frozen=True)
class ResultCategory:
    label: str
    value: int


@dataclass(frozen=True)
class TermsSection:
    title: str
    clauses: tuple[str, ...]


@dataclass(frozen=True)
class AnalysisLine:
    label: str
    value: str


@dataclass(frozen=True)
class Quote:
    text: str
    author: str


_NARRATIVE = (
    NarrativeItem("text", "Hey {recipient_name}...", 2000),
    NarrativeItem("text", "I have something to tell you...", 2000),
    NarrativeItem("text", "Something *important*.", 2500),
    NarrativeItem("emoji", "💭", 1500),
    NarrativeItem("text", "I could have just sent a message to the group chat...", 2000),
    NarrativeItem("text", "But I wanted to do something *special*.", 2500),
    NarrativeItem("emoji", "✨", 1500),
    NarrativeItem("text", "Because you are special.", 2000),
    NarrativeItem("emoji", "🎉", 1000),
    NarrativeItem("text", "So...", 1500),
)


_QUIZ = (
    QuizQuestion("Pick your ideal night out:", (
        QuizOption("🎲", "Board game night"),
        QuizOption("🎬", "Movie and series marathon"),
        QuizOption("🍻", "Bar or restaurant with friends"),
        QuizOption("🎤", "Karaoke (even off-key)"),
    )),
    QuizQuestion("Your communication style:", (
        QuizOption("😂", "Meme spam"),
        QuizOption("🗣️", "Three-minute voice notes"),
        QuizOption("📍", "Improbable plans"),
        QuizOption("👻", "Read now, reply in three days"),
    )),
    QuizQuestion("The ultimate party snack:", (
        QuizOption("🍕", "Pizza, the timeless classic"),
        QuizOption("🧀", "Cheese and charcuterie board"),
        QuizOption("🍿", "Popcorn and candy"),
        QuizOption("🌮", "Tacos and burritos"),
    )),
    QuizQuestion("Your number one quality as a friend:", (
        QuizOption("🎉", "I bring the vibe"),
        QuizOption("👂", "I listen"),
        QuizOption("🤡", "I make people laugh (on purpose or not)"),
        QuizOption("🛋️", "My couch is always free"),
    )),
    QuizQuestion("Valentine's Day to you is:", (
        QuizOption("🤷", "An excuse to eat chocolate"),
        QuizOption("🥳", "A night for lovebirds"),
        QuizOption("💅", "A chance to treat yourself"),
        QuizOption("🎊", "All of the above!"),
    )),
)

_TERMS = (
    TermsSection("Article 1: General Provisions", (
        "1.1 By continuing, you acknowledge that the crew is genuinely great.",
        "1.2 This agreement binds all future parties and get-togethers.",
        "1.3 Participants reserve the right to be iconic at any time.",
    )),
    TermsSection("Article 2: Party Requirements", (
        "2.1 At least three (3) real laughing fits are required per evening.",
        "2.2 Sharing gossip is strongly encouraged.",
        "2.3 Silences must be filled with knowing looks.",
    )),
    TermsSection("Article 3: Food Provisions", (
        "3.1 Dessert is always acceptable, even at 2am.",
        "3.2 'Sharing' means ordering more for everyone.",
        "3.3 Late-night snack runs are supported.",
    )),
    TermsSection("Article 4: Support Clause", (
        "4.1 We hype our friends up, even for the most random things.",
        "4.2 Compliments are unlimited and mandatory.",
    )),
    TermsSection("Article 5: Final Provisions", (
        "5.1 This friendship renews automatically every year.",
        "5.2 No refunds on unforgettable memories.",
        "5.3 By accepting, you agree to have a memorable time. 🎉",
    )),
)


@dataclass(frozen=True)
class ContentConfig:
    """User-facing text for the whole narrative."""
    recipient_name: str = "friends"
    sender_name: str = "your secret admirer"
    date_suggestion: str = "February 14"
    location_suggestion: str = "our usual place"

    narrative: tuple[NarrativeItem, ...] = _NARRATIVE
    system_logs: tuple[str, ...] = (
        "Initializing friendship protocol v2.14...",
        "Calibrating good-mood sensors...",
        "Loading inside-joke database...",
        "Checking snack compatibility...",
        "Warming up laughing fits...",
        "Preparing dramatic reveal...",
    )
    countdown_final_glyph: str = "🎊"

    question_title: str = "Will you be my Valentines?"
    question_subtitle: str = "{recipient_name}, I have a very important question..."
    escape_hatch_text: str = 'Ok ok, you can say "not now"'
    no_button_messages: tuple[str, ...] = (
        "The button seems to have other plans... 🏃",
        "Oops! It moved again!",
        "This button has commitment issues",
        "Are we playing tag now?",
        "The button is a little shy",
        "It is not running away, it is repositioning strategically",
        "Did you really think that would work? 😏",
        "Keep trying, it is fun to watch",
    )
    no_button_labels: tuple[str, ...] = ("No", "Nope", "Never", "Really?", "Still trying?", "😤")
    no_button_disarmed_message: str = "Fine, you can click it now... 😏"

    quiz_questions: tuple[QuizQuestion, ...] = _QUIZ
    quiz_score_label: str = "99.97%"
    quiz_result_categories: tuple[ResultCategory, ...] = (
        ResultCategory("Vibes", 98),
        ResultCategory("Friend Level", 100),
        ResultCategory("Humor Sync", 97),
        ResultCategory("Party Factor", 99),
        ResultCategory("Snack Availability", 95),
    )

    terms_sections: tuple[TermsSection, ...] = _TERMS
    terms_decline_message: str = "Oops, legal says you need to reread Article 2 😇"

    ai_analysis_results: tuple[AnalysisLine, ...] = (
        AnalysisLine("Laughing fit probability", "Very high"),
        AnalysisLine("Snack compatibility", "Expert level"),
        AnalysisLine("Best friend score", "11/10"),
        AnalysisLine("Reliability index", "Maximum"),
        AnalysisLine("Fun potential", "Unlimited"),
        AnalysisLine("Complicity level", "🤝🤝🤝"),
    )
    ai_conclusion: str = "Recommendation: say YES 🎉"

    sincere_message: str = (
        "Ok, jokes aside...\n\n"
        "I am really glad to have you in my life.\n\n"
        "Valentine's Day is also about celebrating the people we love, "
        "and you are part of that. So, party? 🎉"
    )
    friend_quotes: tuple[Quote, ...] = (
        Quote("The best moments are the ones spent with people as wild as us", "Popular Wisdom"),
        Quote("Friendship is like wifi: you cannot see it, but you know it is there", "A Poet Geek"),
        Quote("Why look for a soulmate when you already found your squad?", "A Modern Philosopher"),
    )
    alternative_dates: tuple[str, ...] = (
        "February 15 (chocolate is cheaper!)",
        "This weekend (why wait?)",
        "Whenever everyone is free 🎊",
    )
    alternative_date_message: str = "Perfect! I cannot wait! 💕"
    copy_message_template: str = "Yes! I am in for the Valentine's party! 🎉 See you on {date_suggestion}!"
    copy_success_message: str = "Message copied! Send it to the group! 📱"
    copy_failure_prefix: str = "Could not copy. The message is: "
    reset_message: str = "Starting over! 🔄"

    def fill(self, template: str) -> str:
        """Substitute the personal fields into a text template."""
        return template.format(
            date_suggestion=self.date_suggestion,
            location_suggestion=self.location_suggestion,
            recipient_name=self.recipient_name,
            sender_name=self.sender_name,
        )

    def copy_message(self) -> str:
        """Render the response message offered on the celebration view."""
        return self.fill(self.copy_message_template)
