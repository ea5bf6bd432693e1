"""
Chat assistant
Groq LLM with a rule-based fallback for when the provider is down or out of quota
"""
import logging
from typing import Any, Dict, List, Optional

from sharesathi.data_sources.groq import GroqClient, groq
from sharesathi.exceptions import DataSourceError, QuotaExceededError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are ShareSathi, a helpful AI assistant for Indian stock market investors.
You help users understand their stock portfolio, market trends, and provide educational information about investing.

Key guidelines:
- Focus on the Indian stock market (BSE/NSE)
- Use Indian Rupee (₹) for currency
- Explain concepts in simple terms suitable for retail investors, especially older adults
- Be concise and helpful - keep responses under 150 words
- Never give specific buy/sell recommendations - only educational information
- When discussing numbers, use Indian numbering system (lakhs, crores)
- If you don't know something, say so honestly
- Be warm and patient, as you're helping someone who may not be tech-savvy

Remember: This is for educational purposes only, not financial advice."""

MAX_CONTEXT_STOCKS = 10

# ==================== Rule-based answers ====================

SENSEX_ANSWER = (
    "SENSEX (Sensitive Index) is the benchmark index of the Bombay Stock Exchange (BSE), "
    "comprising 30 of the largest and most actively traded stocks. It reflects the overall "
    "health of the Indian economy and stock market. When SENSEX goes up, it generally means "
    "the market is doing well!"
)

NIFTY_ANSWER = (
    "NIFTY 50 is the benchmark index of the National Stock Exchange (NSE), consisting of 50 "
    "large-cap companies. It represents about 65% of the free-float market capitalization of "
    "stocks listed on NSE. It's one of the most watched indicators of the Indian stock market."
)

MARKET_CAP_ANSWER = (
    "Market Capitalization (Market Cap) is the total value of a company's shares. It's "
    "calculated as: Share Price × Total Shares. In India, companies are classified as:\n"
    "• Large Cap: ₹20,000+ Crore\n"
    "• Mid Cap: ₹5,000-20,000 Crore\n"
    "• Small Cap: Below ₹5,000 Crore\n\n"
    "Larger companies are generally considered safer but may grow slower."
)

PE_ANSWER = (
    "P/E (Price-to-Earnings) ratio tells you how much investors are paying for each rupee of "
    "profit. Formula: Share Price ÷ Earnings Per Share.\n\n"
    "• Low P/E (below 15): May be undervalued or slow growth\n"
    "• High P/E (above 25): Investors expect high growth\n\n"
    "The average P/E for NIFTY 50 is around 20-22."
)

DIVIDEND_ANSWER = (
    "A dividend is a portion of company profits given to shareholders. If you own shares, you "
    "receive money without selling!\n\n"
    "Dividend Yield = (Annual Dividend ÷ Share Price) × 100\n\n"
    "Example: If a ₹100 stock gives ₹5 dividend, yield is 5%.\n\n"
    "Note: In India, dividends are taxed at your income tax slab rate."
)

BULL_BEAR_ANSWER = (
    "Bull Market: When prices are rising and investors are optimistic. Like a bull thrusting "
    "its horns upward!\n\n"
    "Bear Market: When prices are falling and investors are pessimistic. Like a bear swiping "
    "its paw downward.\n\n"
    "Remember: Markets go through cycles. Stay patient and don't panic during bear markets!"
)

GREETING_ANSWER = (
    "Namaste! I'm ShareSathi, your friendly stock market assistant. I can help you understand:\n\n"
    "• Market indices (SENSEX, NIFTY)\n"
    "• Stock terms (P/E ratio, Market Cap)\n"
    "• Your watchlist performance\n"
    "• Basic investing concepts\n\n"
    "What would you like to know?"
)

THANKS_ANSWER = (
    "You're most welcome! Feel free to ask anytime you have questions about stocks or the "
    "market. Happy investing!"
)

HOW_TO_INVEST_ANSWER = (
    "To invest in Indian stocks, you need:\n\n"
    "1. PAN Card\n"
    "2. Demat Account (through Zerodha, Groww, etc.)\n"
    "3. Linked Bank Account\n\n"
    "Start small, invest regularly (SIP in mutual funds is great for beginners), and never "
    "invest money you can't afford to lose.\n\n"
    "Would you like to know more about any specific topic?"
)

HELP_ANSWER = (
    "I can help you understand stock market concepts! Try asking me about:\n\n"
    '• "What is SENSEX?"\n'
    '• "Explain P/E ratio"\n'
    '• "What is market cap?"\n'
    '• "How do dividends work?"\n'
    '• "Bull vs Bear market"'
)


def get_simple_response(message: str) -> str:
    """Keyword-matched canned answer, checked in priority order"""
    text = message.lower()

    if "what is" in text and "sensex" in text:
        return SENSEX_ANSWER
    if "what is" in text and "nifty" in text:
        return NIFTY_ANSWER
    if "market cap" in text:
        return MARKET_CAP_ANSWER
    if "pe ratio" in text or "p/e" in text:
        return PE_ANSWER
    if "dividend" in text:
        return DIVIDEND_ANSWER
    if "bull" in text and "bear" in text:
        return BULL_BEAR_ANSWER
    if "hello" in text or "hi " in text or text == "hi":
        return GREETING_ANSWER
    if "thank" in text:
        return THANKS_ANSWER
    if "how" in text and ("buy" in text or "invest" in text):
        return HOW_TO_INVEST_ANSWER
    return HELP_ANSWER


def build_system_prompt(
    context_stocks: Optional[List[Dict[str, Any]]] = None,
    custom_prompt: Optional[str] = None,
) -> str:
    """
    System prompt plus a one-line summary of up to 10 watchlist stocks

    Stock rows need name, price and change_percent.
    """
    prompt = custom_prompt or SYSTEM_PROMPT

    if context_stocks:
        summary = ", ".join(
            f"{s['name']}: ₹{s['price']:.2f} "
            f"({'+' if s['change_percent'] >= 0 else ''}{s['change_percent']:.2f}%)"
            for s in context_stocks[:MAX_CONTEXT_STOCKS]
        )
        prompt += f"\n\nUser's current watchlist: {summary}"

    return prompt


class ChatService:
    """Chat assistant"""

    def __init__(self, client: Optional[GroqClient] = None):
        self.client = client or groq

    @property
    def model(self) -> str:
        return self.client.model

    async def reply(
        self,
        messages: List[Dict[str, str]],
        context_stocks: Optional[List[Dict[str, Any]]] = None,
        custom_prompt: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Answer the last message of a conversation

        Args:
            messages: non-empty [{"role", "content"}, ...]

        Returns:
            {"response": str, "unavailable": bool}; unavailable marks a provider quota stop
        """
        system_prompt = build_system_prompt(context_stocks, custom_prompt)
        unavailable = False

        try:
            response = await self.client.chat(messages, system_prompt)
        except QuotaExceededError as e:
            logger.warning(f"Chat provider out of quota, using fallback: {e.message}")
            unavailable = True
            response = get_simple_response(messages[-1]["content"])
        except DataSourceError as e:
            logger.warning(f"Chat provider failed, using fallback: {e.message}")
            response = get_simple_response(messages[-1]["content"])

        return {"response": response, "unavailable": unavailable}


chat_service = ChatService()
