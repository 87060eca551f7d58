"""Calculation engine: input resolution, energy balance, DPE, savings, subsidies."""
