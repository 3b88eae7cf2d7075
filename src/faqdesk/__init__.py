"""faqdesk — knowledge-base manager for support FAQ records."""
