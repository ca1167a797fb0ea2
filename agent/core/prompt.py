GREETING_ID = "initial-message"
GREETING_TEXT = "Hello! I'm an assistant powered by Gemini. How can I help you today?"

MISSING_KEY_MESSAGE = (
    "API Key is missing. Make sure you have set the GEMINI_API_KEY environment "
    "variable in your .env file or deployment service."
)

UNKNOWN_ERROR_TEXT = "An unknown error occurred."


def init_failure_banner(error_text: str) -> str:
    return (
        "Failed to initialize the chatbot. Please check your API key and setup."
        f"\n\nError: {error_text}"
    )


def apology_text(error_text: str) -> str:
    return f"Sorry, I ran into a problem. Please try again.\n\n*Error: {error_text}*"


def send_failure_banner(error_text: str) -> str:
    return f"API Error: {error_text}"
