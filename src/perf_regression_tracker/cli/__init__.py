"""
Command line tools.

- build_cache: Collect JSON sample files into a scenario results cache
- compare_builds: Report baseline/current deviations from a results cache
"""
