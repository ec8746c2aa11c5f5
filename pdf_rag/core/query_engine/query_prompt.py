"""
Query engine prompt.

Fixed persona and formatting rules for the system turn, plus the grounding
rules that always follow it. The human turn carries the question and a
preview of every retrieved chunk. When nothing was retrieved the human turn
says so explicitly, and the grounding rules tell the model to answer with
the not-found sentence instead of general knowledge.

Dependencies: langchain_core.prompts
System role: Prompt template for grounded generation
"""

from collections.abc import Sequence

from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate

from pdf_rag.boundary.vdb.vector_schemas import SearchResult

NOT_FOUND_MESSAGE = "I don't have that specific information in our current policy documents"

NO_CONTEXT_MARKER = "NO RELEVANT CONTEXT FOUND"

NO_CONTEXT_NOTICE = f"{NO_CONTEXT_MARKER}: the knowledge base returned no passages for this question."

SYSTEM_PROMPT = """You are a friendly and helpful HR leave policy assistant. You give clear, well-structured answers about leave policies.

## Response Format
1. Open with a short greeting when it fits (e.g. "Here's what I found about your leave question:")
2. Group information under short descriptive headings
3. Use bullet points (•) for lists so answers are easy to scan
4. Use plain conversational language instead of technical jargon
5. Do not mention context numbers unless they are needed for clarity
6. Close with a brief helpful remark when it fits

## Tone
Professional yet warm, like a colleague explaining a policy in person."""

GROUNDING_RULES = f"""## Grounding Rules
- Use ONLY the vector database results in the user message. Never add facts from general knowledge.
- If the results do not contain the answer, reply exactly: "{NOT_FOUND_MESSAGE}".
- If the user message says "{NO_CONTEXT_MARKER}", there is no context at all: reply with the sentence above and nothing else."""

QUERY_PROMPT = ChatPromptTemplate.from_messages([
    ("system", "{instruction}\n\n{grounding_rules}"),
    ("human", "User question: {question}\n\nvector database results:\n{context}"),
])


def format_context(results: Sequence[SearchResult], preview_chars: int = 500) -> str:
    """
    Render retrieved records as numbered context blocks.

    Args:
        results: Search results, best first
        preview_chars: Characters of each record's text to include

    Returns:
        str: Blocks separated by blank lines, or NO_CONTEXT_NOTICE when empty
    """
    if not results:
        return NO_CONTEXT_NOTICE

    blocks = []
    for position, result in enumerate(results, start=1):
        text = result.record.text
        preview = text[:preview_chars] + ("..." if len(text) > preview_chars else "")
        blocks.append(f"Context #{position} (score: {result.score:.4f}):\n{preview}")
    return "\n\n".join(blocks)


def build_messages(
    question: str,
    results: Sequence[SearchResult],
    preview_chars: int = 500,
    instruction: str | None = None,
) -> list[BaseMessage]:
    """
    Build the system and human messages for generation.

    Args:
        question: User question
        results: Retrieved records
        preview_chars: Characters of each record's text to include
        instruction: Persona replacing SYSTEM_PROMPT (grounding rules still apply)

    Returns:
        list[BaseMessage]: [SystemMessage, HumanMessage]
    """
    return QUERY_PROMPT.invoke({
        "instruction": instruction or SYSTEM_PROMPT,
        "grounding_rules": GROUNDING_RULES,
        "question": question,
        "context": format_context(results, preview_chars),
    }).to_messages()
