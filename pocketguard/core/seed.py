import logging

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from pocketguard.models.budget import Category
from pocketguard.models.quiz import QuizQuestion

logger = logging.getLogger(__name__)


DEFAULT_CATEGORIES = [
    {"name": "Food", "icon": "utensils", "icon_color": "#10B981"},
    {"name": "Shopping", "icon": "shopping-bag", "icon_color": "#3B82F6"},
    {"name": "Entertainment", "icon": "film", "icon_color": "#8B5CF6"},
    {"name": "Transport", "icon": "bus", "icon_color": "#F59E0B"},
    {"name": "Education", "icon": "book", "icon_color": "#EC4899"},
    {"name": "Other", "icon": "ellipsis-h", "icon_color": "#6B7280"},
]


DEFAULT_QUIZ_QUESTIONS = [
    # --- easy ---
    {
        "question": "What happens when you consistently spend more than you earn?",
        "options": [
            "You build wealth faster",
            "Your debt increases over time",
            "Your credit score improves",
            "Banks offer you better interest rates",
        ],
        "correct_answer": 1,
        "explanation": "Spending more than you earn means borrowing the difference, and that debt "
                       "keeps growing as interest compounds.",
        "difficulty": "easy",
    },
    {
        "question": "Which of these is a good budgeting habit?",
        "options": [
            "Spending your entire pocket money immediately",
            "Only checking your balance once a month",
            "Tracking your expenses and categorizing them",
            "Borrowing from friends for non-essential purchases",
        ],
        "correct_answer": 2,
        "explanation": "Tracking and categorizing expenses shows where your money goes and where you can save.",
        "difficulty": "easy",
    },
    {
        "question": "You get 1000 rupees of pocket money. What is a sensible first step?",
        "options": [
            "Set aside a part of it for savings",
            "Buy the most expensive thing you can afford",
            "Lend all of it to a friend",
            "Keep it in your school bag",
        ],
        "correct_answer": 0,
        "explanation": "Paying yourself first, by saving before spending, is the simplest way to build savings.",
        "difficulty": "easy",
    },
    {
        "question": "What does a budget help you do?",
        "options": [
            "Spend money faster",
            "Plan how much you can spend on each thing",
            "Avoid ever buying anything fun",
            "Get a loan from the bank",
        ],
        "correct_answer": 1,
        "explanation": "A budget is a spending plan: it decides in advance how much goes to each category.",
        "difficulty": "easy",
    },
    # --- medium ---
    {
        "question": "Why is having an emergency fund important?",
        "options": [
            "It's not important if you have good income",
            "It lets you handle unexpected expenses without going into debt",
            "It helps you pay for luxury items",
            "Banks require it for account maintenance",
        ],
        "correct_answer": 1,
        "explanation": "An emergency fund covers surprises like a broken phone or a medical bill "
                       "without relying on loans.",
        "difficulty": "medium",
    },
    {
        "question": "What's the difference between needs and wants in budgeting?",
        "options": [
            "There is no difference, they're the same thing",
            "Needs are things you can't live without, wants are things you can live without",
            "Needs are expensive, wants are cheap",
            "Needs are monthly expenses, wants are one-time purchases",
        ],
        "correct_answer": 1,
        "explanation": "Needs are essentials such as food, travel to school and study material. "
                       "Wants improve life but are optional.",
        "difficulty": "medium",
    },
    {
        "question": "A UPI payment request arrives from someone you don't know. What should you do?",
        "options": [
            "Approve it quickly so it goes away",
            "Enter your UPI PIN to check who sent it",
            "Decline it and never share your PIN",
            "Forward it to your friends",
        ],
        "correct_answer": 2,
        "explanation": "You only enter a UPI PIN to send money, never to receive it. Unknown requests are "
                       "a common scam.",
        "difficulty": "medium",
    },
    {
        "question": "You have overspent your Food budget this month. What is the best response?",
        "options": [
            "Ignore it, budgets don't matter",
            "Move money from savings without thinking",
            "Cut back on food spending for the rest of the month and review next month's plan",
            "Stop eating",
        ],
        "correct_answer": 2,
        "explanation": "Overspending is a signal to adjust. Reduce spending now and plan a more realistic "
                       "allocation next month.",
        "difficulty": "medium",
    },
    # --- hard ---
    {
        "question": "What is the 50/30/20 budgeting rule?",
        "options": [
            "Spend 50% on entertainment, 30% on food, 20% on savings",
            "Spend 50% on needs, 30% on wants, and 20% on savings/debt repayment",
            "Spend 50% on housing, 30% on transportation, 20% on everything else",
            "Spend 50% of your time working, 30% having fun, 20% planning finances",
        ],
        "correct_answer": 1,
        "explanation": "The 50/30/20 rule splits income into needs, wants and savings as a simple starting framework.",
        "difficulty": "hard",
    },
    {
        "question": "You save 100 rupees at 10% interest compounded yearly. How much do you have after 2 years?",
        "options": ["110", "120", "121", "200"],
        "correct_answer": 2,
        "explanation": "Year one gives 110. Year two earns interest on 110, giving 121. That extra rupee is compounding.",
        "difficulty": "hard",
    },
    {
        "question": "Why do 'buy now, pay later' offers cost more than they seem?",
        "options": [
            "They never cost anything extra",
            "Late fees and interest can make the total much higher than the sticker price",
            "Shops are not allowed to offer them",
            "They only work for expensive items",
        ],
        "correct_answer": 1,
        "explanation": "Missed instalments usually add fees and interest, so the real price is higher.",
        "difficulty": "hard",
    },
    {
        "question": "Prices rise 6% a year while your savings earn 4%. What happens to your savings' buying power?",
        "options": [
            "It grows by 4% a year",
            "It stays the same",
            "It shrinks by roughly 2% a year",
            "It grows by 10% a year",
        ],
        "correct_answer": 2,
        "explanation": "When inflation outpaces interest, the same money buys less each year.",
        "difficulty": "hard",
    },
]


def default_categories_for(user_id: int) -> list[Category]:
    return [Category(user_id=user_id, **cat) for cat in DEFAULT_CATEGORIES]


async def seed_quiz_questions(db: AsyncSession):
    result = await db.execute(select(func.count(QuizQuestion.id)))
    count = result.scalar()
    if count > 0:
        logger.info("Question bank already has %s questions. Skipping seed.", count)
        return

    db.add_all([QuizQuestion(**q) for q in DEFAULT_QUIZ_QUESTIONS])
    await db.commit()
    logger.info("Seeded %s quiz questions.", len(DEFAULT_QUIZ_QUESTIONS))
