"""Benchmark execution: options, scene provider, query builder, executor and planners."""
