"""Report serializers for the in-memory coverage tree."""
