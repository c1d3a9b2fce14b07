"""Infrastructure modules for the What To Cook API.

Production-grade infrastructure components:
- Database: Supabase client singleton and recipe repository
- Rate Limiting: Session-scoped request quota
"""
