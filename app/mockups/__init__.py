"""Batch mockup generation: locks, persona, job queue, scheduler and coordinator."""
