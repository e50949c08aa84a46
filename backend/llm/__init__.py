"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Build a ranking prompt from the query ingredients and candidate recipes.
- Call Groq to reorder candidates by ingredient match quality.
- Signal a soft failure when the LLM is unavailable or returns invalid output.
"""
