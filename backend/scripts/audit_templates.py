"""
Template Audit Script - Report requirement problems for every template
Run: python -m scripts.audit_templates [--all]
"""
import argparse
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from npdi.services.template_registry import TemplateRegistry


def main():
    parser = argparse.ArgumentParser(description="Audit ticket templates against their form configurations")
    parser.add_argument("--all", action="store_true", help="Include inactive templates")
    args = parser.parse_args()
    
    registry = TemplateRegistry()
    templates = registry.list_templates(active_only=not args.all)
    
    problems = 0
    for template in templates:
        flags = []
        if template.is_default:
            flags.append("default")
        if not template.is_active:
            flags.append("inactive")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        print(f"\n{template.name} ({template.template_id}){suffix}")
        print(f"  Requirements: {len(template.submission_requirements)}")
        
        issues = registry.audit(template)
        if not issues:
            print("  OK")
        for issue in issues:
            problems += 1
            print(f"  - {issue.issue_type.value}: {issue.message}")
    
    print(f"\n{len(templates)} template(s), {problems} issue(s)")
    return 1 if problems else 0


if __name__ == "__main__":
    sys.exit(main())
