"""Product naming shown in the API docs and startup logs."""

BRAND_NAME = "Parikshan AI"
BRAND_APP_DESCRIPTION = "AI-personalized candidate assessments with n8n-driven evaluation"
