import io
import unittest

from treelox.diagnostics import Report
from treelox.front_end import Session

class Harness:
	""" A session whose printing lands in a string. """
	def __init__(self):
		self.report = Report()
		self.out = io.StringIO()
		self.session = Session(self.report, self.out)

	def run(self, text) -> list[str]:
		self.out.seek(0)
		self.out.truncate()
		self.session.run(text)
		return self.out.getvalue().splitlines()

def _run(text):
	harness = Harness()
	return harness.run(text), harness.report

class InterpreterCase(unittest.TestCase):

	def expect(self, text, *lines):
		output, report = _run(text)
		report.assert_no_issues("Ostensibly-good program failed.")
		self.assertEqual(list(lines), output)

	def expect_runtime_error(self, text, message, *lines):
		output, report = _run(text)
		assert not report.had_error
		assert report.had_runtime_error
		self.assertEqual([message], [i.message for i in report.issues])
		self.assertEqual(list(lines), output)


class ExpressionTests(InterpreterCase):

	def test_arithmetic(self):
		self.expect("print 1 + 2 * 3; print (1 + 2) * 3; print 7 / 2; print -(4 - 6);", "7", "9", "3.5", "2")

	def test_concatenation(self):
		self.expect(
			'print "con" + "cat"; print "n: " + 1; print 2.5 + "!"; print true + "x"; print "it is " + nil;',
			"concat", "n: 1", "2.5!", "truex", "it is nil",
		)

	def test_comparison(self):
		self.expect("print 1 < 2; print 2 <= 2; print 1 > 2; print 3 >= 4;", "true", "true", "false", "false")

	def test_equality_is_structural(self):
		self.expect(
			'print nil == nil; print nil == false; print 1 == 1; print "a" == "a"; print true == 1; print 0 != "0";',
			"true", "false", "true", "true", "false", "true",
		)

	def test_truthiness(self):
		self.expect(
			'if (0) print "zero"; if ("") print "empty"; if (nil) print "nil"; else print "no"; print !false; print !0;',
			"zero", "empty", "no", "true", "false",
		)

	def test_logical_operators_short_circuit(self):
		self.expect(
			'print nil or "x"; print false and 1; print 1 and 2; fun boom() { print "boom"; } print true or boom();',
			"x", "false", "2", "true",
		)

	def test_division_by_zero(self):
		self.expect_runtime_error("print 5 / 0;", "Division by zero.")
		self.expect_runtime_error("print 0 / 0;", "Division by zero.")

	def test_operand_type_errors(self):
		self.expect_runtime_error('print -"a";', "Operand must be a number.")
		self.expect_runtime_error('print 1 < "a";', "Operands must be numbers.")
		self.expect_runtime_error('print 2 * nil;', "Operands must be numbers.")
		self.expect_runtime_error('print nil + 1;', "Operands must be two numbers or two strings.")

	def test_printing_values(self):
		self.expect(
			"fun f() {} class C {} print f; print clock; print C; print C(); print 3; print 0.25;",
			"<fn f>", "<native fn>", "C", "C instance", "3", "0.25",
		)

	def test_clock(self):
		self.expect("print clock() > 0;", "true")

	def test_printing_numbers(self):
		self.expect(
			"print 100000000000000000000; print 1000000000000000; print 123456789012345; print 0.00001; print 0.0001; print 1 / 3; print -0;",
			"1E+20", "1E+15", "123456789012345", "1E-05", "0.0001", "0.3333333333333333", "-0",
		)
		self.expect("print 1000000 * 1000000 * 1000000 * 1.5;", "1.5E+18")

	def test_deeply_nested_grouping(self):
		self.expect("print " + "(" * 200 + "1" + ")" * 200 + ";", "1")


class StatementTests(InterpreterCase):

	def test_blocks_scope_variables(self):
		self.expect("var a = 1; { var a = a + 1; print a; } print a;", "2", "1")

	def test_shadowing_reads_outer_value(self):
		self.expect("{ var a = 1; { var a = a; a = a + 10; print a; } print a; }", "11", "1")

	def test_uninitialized_variable_is_nil(self):
		self.expect("var a; print a;", "nil")

	def test_loops(self):
		self.expect("var i = 0; while (i < 3) { print i; i = i + 1; }", "0", "1", "2")
		self.expect("for (var i = 0; i < 3; i = i + 1) print i;", "0", "1", "2")

	def test_undefined_variables(self):
		self.expect_runtime_error("print nowhere;", "Undefined variable 'nowhere'.")
		self.expect_runtime_error("nowhere = 1;", "Undefined variable 'nowhere'.")

	def test_static_errors_prevent_execution(self):
		output, report = _run("print 1; return 2;")
		assert report.had_error
		assert not report.had_runtime_error
		self.assertEqual([], output)

	def test_lexical_errors_prevent_execution(self):
		output, report = _run("print 1; @")
		assert report.had_error
		self.assertEqual([], output)


class FunctionTests(InterpreterCase):

	def test_recursion(self):
		self.expect("fun fib(n) { if (n < 2) return n; return fib(n - 1) + fib(n - 2); } print fib(10);", "55")

	def test_deep_recursion(self):
		self.expect("fun down(n) { if (n <= 0) return 0; return down(n - 1); } print down(200);", "0")

	def test_unbounded_recursion_is_a_runtime_error(self):
		self.expect_runtime_error('print "go"; fun forever(n) { return forever(n + 1); } forever(0); print "gone";', "Stack overflow.", "go")

	def test_return_unwinds_loops(self):
		self.expect("fun f() { while (true) { for (;;) { return 3; } } } print f();", "3")

	def test_missing_return_yields_nil(self):
		self.expect("fun f() { 1; } print f(); fun g() { return; } print g();", "nil", "nil")

	def test_arity_mismatch(self):
		self.expect_runtime_error("fun f(a, b) {} f(1);", "Expected 2 arguments but got 1.")
		self.expect_runtime_error("clock(1);", "Expected 0 arguments but got 1.")

	def test_not_callable(self):
		self.expect_runtime_error('"text"();', "Can only call functions and classes.")
		self.expect_runtime_error("var x = nil; x(1, 2);", "Can only call functions and classes.")

	def test_arguments_evaluate_left_to_right(self):
		self.expect("fun show(x) { print x; return x; } fun two(a, b) {} two(show(1), show(2));", "1", "2")

	def test_closures_share_and_separate(self):
		self.expect("""
			var inc; var get;
			fun make() {
				var n = 0;
				fun i() { n = n + 1; }
				fun g() { return n; }
				inc = i;
				get = g;
			}
			make();
			inc(); inc();
			print get();
			var first_get = get;
			make();
			inc();
			print get();
			print first_get();
		""", "2", "1", "2")

	def test_closure_captures_frame_not_snapshot(self):
		self.expect("""
			var a = "global";
			{
				fun show() { print a; }
				show();
				var a = "block";
				show();
			}
		""", "global", "global")

	def test_counter_factory(self):
		self.expect("""
			fun counter() {
				var count = 0;
				fun next() { count = count + 1; return count; }
				return next;
			}
			var c1 = counter();
			var c2 = counter();
			print c1(); print c1(); print c2();
		""", "1", "2", "1")


class ClassTests(InterpreterCase):

	def test_fields_and_methods(self):
		self.expect("""
			class Point {
				init(x, y) { this.x = x; this.y = y; }
				sum() { return this.x + this.y; }
			}
			var p = Point(1, 2);
			print p.sum();
			p.x = 10;
			print p.sum();
		""", "3", "12")

	def test_bound_methods_remember_their_instance(self):
		self.expect("""
			class Box { init(v) { this.v = v; } get() { return this.v; } }
			var m = Box("one").get;
			var n = Box("two").get;
			print m(); print n();
		""", "one", "two")

	def test_fields_shadow_methods(self):
		self.expect("""
			class A { m() { return "method"; } }
			var a = A();
			print a.m();
			fun f() { return "field"; }
			a.m = f;
			print a.m();
		""", "method", "field")

	def test_initializer_returns_this(self):
		self.expect("""
			class A { init() { this.n = 1; return; } }
			var a = A();
			print a.init() == a;
			print a.n;
		""", "true", "1")

	def test_class_arity_follows_init(self):
		self.expect_runtime_error("class A { init(x) {} } A();", "Expected 1 arguments but got 0.")
		self.expect_runtime_error("class B {} B(1);", "Expected 0 arguments but got 1.")

	def test_inherited_methods_are_found_by_lookup(self):
		self.expect("""
			class A { hello() { return "A says hi"; } }
			class B < A {}
			class C < B {}
			print C().hello();
		""", "A says hi")

	def test_super_is_bound_statically(self):
		self.expect("""
			class Base { greet() { return "base"; } }
			class Derived < Base { greet() { return super.greet() + "-derived"; } }
			class Further < Derived {}
			class Deeper < Further { greet() { return super.greet(); } }
			print Derived().greet();
			print Further().greet();
			print Deeper().greet();
		""", "base-derived", "base-derived", "base-derived")

	def test_super_binds_the_actual_receiver(self):
		self.expect("""
			class A { name() { return "A"; } who() { return this.name(); } }
			class B < A { name() { return "B"; } who() { return "B:" + super.who(); } }
			print B().who();
		""", "B:B")

	def test_property_errors(self):
		self.expect_runtime_error("var x = 1; print x.y;", "Only instances have properties.")
		self.expect_runtime_error("var x = 1; x.y = 2;", "Only instances have fields.")
		self.expect_runtime_error("class A {} print A().nope;", "Undefined property 'nope'.")
		self.expect_runtime_error(
			"class A {} class B < A { m() { return super.nope(); } } B().m();",
			"Undefined property 'nope'.",
		)

	def test_superclass_must_be_a_class(self):
		self.expect_runtime_error("var NotClass = 1; class A < NotClass {}", "Superclass must be a class.")


class SessionTests(unittest.TestCase):

	def test_runtime_error_aborts_only_the_rest(self):
		harness = Harness()
		output = harness.run("var a = 1; print a; a = 2; print nil + 1; print 3;")
		self.assertEqual(["1"], output)
		self.assertEqual(["Operands must be two numbers or two strings.\n[line 1]"], [i.as_text() for i in harness.report.issues])
		harness.report.reset()
		self.assertEqual(["2"], harness.run("print a;"))
		assert harness.report.ok()

	def test_definitions_persist_between_runs(self):
		harness = Harness()
		harness.run("fun twice(x) { return x * 2; } class A { m() { return this; } }")
		self.assertEqual(["8", "true"], harness.run("print twice(4); var a = A(); print a.m() == a;"))
		assert harness.report.ok()

	def test_session_survives_a_stack_overflow(self):
		harness = Harness()
		harness.run("var a = \"outer\"; fun forever() { var a = \"inner\"; forever(); }")
		self.assertEqual([], harness.run("forever();"))
		self.assertEqual(["Stack overflow.\n[line 1]"], [i.as_text() for i in harness.report.issues])
		harness.report.reset()
		self.assertEqual(["outer"], harness.run("print a;"))
		assert harness.report.ok()

	def test_redefining_a_global_from_itself(self):
		harness = Harness()
		harness.run("var a = 1;")
		self.assertEqual(["2"], harness.run("var a = a + 1; print a;"))
		assert harness.report.ok()


if __name__ == '__main__':
	unittest.main()
