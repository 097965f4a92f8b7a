"""
Couplet Generator package.

Provides:
- Prompt construction for Nankai-flavoured Spring Festival couplets
- A DeepSeek chat-completion client with strict couplet validation
- A FastAPI app serving the page, health checks and POST /api/generate
"""
