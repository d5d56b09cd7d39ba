"""
Answer generation prompt.

System prompt carrying the numbered retrieval context and the citation
instructions, plus the human turn with the question.

Dependencies: langchain_core.prompts
System role: Prompt template for grounded answers
"""

from langchain_core.prompts import ChatPromptTemplate

NO_CONTEXT_NOTICE = "No relevant context was found in the uploaded documents."

SYSTEM_PROMPT = """You are an AI assistant that helps users find information in their uploaded documents.

## Context from relevant documents
{context}

## Instructions
1. Use the provided context to answer the user's question
2. Cite the sources you use with their bracketed numbers, for example [1] or [2][3]
3. Only cite numbers that appear in the context above
4. If the context doesn't contain relevant information, say so clearly
5. Format your responses clearly with proper structure
6. Be professional and concise"""

ANSWER_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT),
    ("human", "{question}"),
])
