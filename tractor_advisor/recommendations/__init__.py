"""
Recommendation engine: scores and ranks tractors for a terrain and power
requirement.

Modules
-------
scorer         : calculate_score() + per-component functions. Pure, no I/O.
classification : Band + classify_utilization() shared by both band schemes.
ranker         : generate_recommendation() + filter_compatible_tractors().
matcher        : match_minimum_power(): minimum power + suitability top list.
reporter       : write_recommendation_json() + write_recommendation_csv().
"""
