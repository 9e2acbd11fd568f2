"""
File output for finished reports.

Modules
-------
export : export_to_json() / export_to_csv() generic writers +
         write_report_json() + flatten_lesson_plan_for_export().
"""
