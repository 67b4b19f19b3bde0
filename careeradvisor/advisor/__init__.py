"""Advisor node: turns a student snapshot and a question into advice text.

Import :class:`~careeradvisor.advisor.agent.AdvisorAgent` from its module;
this package stays import-light so ``careeradvisor.graph`` can depend on
its schemas and templates.
"""
