"""
This is an interpreter for the Lox programming language.

For example:

    treelox program.lox

will run program.lox if possible, or else try to explain why not.

    treelox

with no script starts an interactive prompt. An empty line ends it.

    treelox -h

will explain all the arguments.
"""
import sys, argparse
from pathlib import Path

EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_SOFTWARE = 70

parser = argparse.ArgumentParser(
	prog="treelox",
	description="Tree-walking interpreter for the Lox programming language.",
)
parser.add_argument("script", nargs="?", help="a Lox source file; omit for the interactive prompt.")
parser.add_argument('-c', "--check", action="store_true", help="Check the program but do not actually execute it.")
parser.add_argument('-v', "--verbose", action="count", help="Say more about what is going on, and illustrate errors.")

def run(args) -> int:
	from .diagnostics import Report
	from .front_end import Session
	report = Report(verbose=args.verbose)
	session = Session(report)
	if args.script is None:
		return run_prompt(session)
	else:
		return run_file(session, Path.cwd() / args.script, args.check)

def run_file(session, path:Path, check_only:bool=False) -> int:
	report = session.report
	try:
		text = path.read_text(encoding="utf-8")
	except OSError as ex:
		print("Could not read %s: %s" % (path, ex.strerror), file=sys.stderr)
		return EX_USAGE
	if check_only:
		session.check(text, path)
	else:
		session.run(text, path)
	report.complain_to_console()
	if report.had_error: return EX_DATAERR
	if report.had_runtime_error: return EX_SOFTWARE
	if check_only:
		print("Looks plausible to me.", file=sys.stderr)
	return EX_OK

def run_prompt(session, stdin=None) -> int:
	stdin = stdin or sys.stdin
	report = session.report
	while True:
		print("> ", end="", flush=True)
		line = stdin.readline()
		if not line.strip(): break
		session.run(line)
		report.complain_to_console()
		report.reset()
	return EX_OK

def main(argv=None):
	args, extra = parser.parse_known_args(argv)
	if extra:
		parser.print_usage(sys.stderr)
		sys.exit(EX_USAGE)
	sys.exit(run(args))
