"""
Report assembly: Scoring -> Recommendation -> certificate + metadata.

Modules
-------
assembler : ReportAssembler + assemble_report(): builds the frozen Report.
insights  : build_educator_insights() for one report and
            summarize_reports() across many.
"""
