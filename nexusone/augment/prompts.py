"""Prompt construction for the onboarding assistant."""

POLICY_INSTRUCTIONS = """IMPORTANT INSTRUCTIONS:
- Use the provided company documents and policies to give specific, accurate answers
- When referencing policies, mention the specific document name
- If the user asks about company handbook, benefits, or policies, extract key information \
from the provided documents
- Provide specific details like policy numbers, dates, procedures when available
- If information is not in the provided documents, clearly state that and suggest they \
contact HR for more details"""

NO_POLICY_NOTE = (
    "Note: No specific company policy documents were found for this query. Provide general "
    "guidance and suggest the user check their company handbook or contact HR for specific "
    "policy details."
)

RESPONSE_GUIDELINES = """RESPONSE GUIDELINES:
- Be friendly, professional, and helpful
- Keep responses clear and well-organized
- Use bullet points or numbered lists for multiple items
- If providing policy information, cite the specific document
- Always end with an offer to help with other questions
- Maximum response length: 500 words"""


def build_chat_prompt(
    *,
    message: str,
    company_name: str,
    user_name: str,
    company_context: str,
    policy_context: str,
) -> str:
    """Build the single-turn prompt sent to the model."""
    sections = [
        f"You are an AI HR onboarding assistant for {company_name}. "
        f"You're helping {user_name} with their onboarding process.",
        f"COMPANY CONTEXT:\n{company_context}",
        f'USER QUESTION: "{message}"',
    ]

    if policy_context.strip():
        sections.append(f"RELEVANT COMPANY DOCUMENTS AND POLICIES:\n{policy_context}")
        sections.append(POLICY_INSTRUCTIONS)
    else:
        sections.append(NO_POLICY_NOTE)

    sections.append(RESPONSE_GUIDELINES)
    return "\n\n".join(sections)
