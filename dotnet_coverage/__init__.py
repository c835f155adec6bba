"""Automation wrapper around ``dotnet test`` and ReportGenerator."""
