import os


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key')
    SQLALCHEMY_DATABASE_URI = (os.environ.get('SQLALCHEMY_DATABASE_URI')
                               or os.environ.get('DATABASE_URL', 'sqlite:///site.db'))
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # ── AI content provider ──────────────────────────────────────────────────
    GROQ_API_KEY = os.environ.get('GROQ_API_KEY')
    GROQ_MODEL = os.environ.get('GROQ_MODEL', 'llama-3.3-70b-versatile')

    # ── Assessment / roadmap tuning ──────────────────────────────────────────
    ASSESSMENT_SECONDS = int(os.environ.get('ASSESSMENT_SECONDS', 20 * 60))
    ROADMAP_DAYS = int(os.environ.get('ROADMAP_DAYS', 5))
    COMPREHENSIVE_ROADMAP_DAYS = int(os.environ.get('COMPREHENSIVE_ROADMAP_DAYS', 14))
