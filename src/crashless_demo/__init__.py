"""Demo service exercising crashless against a failing mock data layer."""
