"""Screen controllers and notifications for the InsightBoard client."""
