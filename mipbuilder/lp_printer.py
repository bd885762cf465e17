# --------------------------------------------------------------------------
# Source file provided under Apache License, Version 2.0, January 2004,
# http://www.apache.org/licenses/
# (c) Copyright IBM Corp. 2015, 2016
# --------------------------------------------------------------------------

import re

from mipbuilder.constants import INFINITY

# gendoc: ignore


class LPModelPrinter(object):
    """ Prints columnar model data in LP format.

    The printer works on flat engine data (columns and CSR-less rows),
    so that in-memory engines can honor ``write`` without a solver.
    """
    _lp_re = re.compile(r"[a-df-zA-DF-Z!#$%&()/,;?@_`'{}|\"][a-zA-Z0-9!#$%&()/.,;?@_`'{}|\"]*")

    _lp_symbol_map = {'E': " = ",  # BEWARE NOT ==
                      'L': " <= ",
                      'G': " >= "}

    __expr_indent = ' ' * 6
    __line_width = 78

    def __init__(self, name_offset=1):
        self._name_offset = name_offset

    @classmethod
    def _is_lp_compliant(cls, name):
        if name is None:
            return False
        lp_match = cls._lp_re.match(name)
        return bool(lp_match) and lp_match.end() == len(name)

    def _make_names(self, names, prefix):
        printed = []
        used = set()
        for i, name in enumerate(names):
            if self._is_lp_compliant(name) and name not in used:
                lp_name = name
            else:
                lp_name = "%s%d" % (prefix, i + self._name_offset)
            used.add(lp_name)
            printed.append(lp_name)
        return printed

    @staticmethod
    def _num_to_string(num):
        if num >= INFINITY:
            return "+inf"
        elif num <= -INFINITY:
            return "-inf"
        return "%.12g" % num

    def _print_expr(self, out, terms, varnames, header):
        line = header
        first = True
        for index, coef in terms:
            if coef < 0:
                token = "- %s %s" % (self._num_to_string(-coef), varnames[index]) if coef != -1 \
                    else "- %s" % varnames[index]
            else:
                token = "%s %s" % (self._num_to_string(coef), varnames[index]) if coef != 1 \
                    else varnames[index]
                if not first:
                    token = "+ " + token
            first = False
            if len(line) + len(token) + 1 > self.__line_width:
                out.write(line + "\n")
                line = self.__expr_indent
            line = line + " " + token
        if first:
            line += " 0"
        return line

    def print_model_to_stream(self, out, model_name, columns, rows, sense):
        """ Prints a model to a text stream.

        Args:
            out: a writable text stream.
            model_name: the model name, printed as a comment.
            columns: a sequence of (obj, lb, ub, typecode, name) tuples.
            rows: a sequence of (indices, values, sense_code, rhs, name) tuples.
            sense: 1 to minimize, -1 to maximize.
        """
        varnames = self._make_names([c[4] for c in columns], 'x')
        ctnames = self._make_names([r[4] for r in rows], 'c')

        out.write("\\Problem name: %s\n\n" % (model_name or 'model'))
        out.write("Minimize\n" if sense == 1 else "Maximize\n")
        obj_terms = [(i, c[0]) for i, c in enumerate(columns) if c[0] != 0]
        out.write(self._print_expr(out, obj_terms, varnames, " obj:") + "\n")

        out.write("Subject To\n")
        for (indices, values, sense_code, rhs, _), ctname in zip(rows, ctnames):
            line = self._print_expr(out, zip(indices, values), varnames, " %s:" % ctname)
            out.write(line + self._lp_symbol_map[sense_code] + self._num_to_string(rhs) + "\n")

        out.write("\nBounds\n")
        for (obj, lb, ub, typecode, _), varname in zip(columns, varnames):
            if typecode == 'B':
                out.write(" 0 <= %s <= 1\n" % varname)
            elif lb <= -INFINITY and ub >= INFINITY:
                out.write(" %s free\n" % varname)
            elif ub >= INFINITY:
                if 0 != lb:
                    out.write(" %s >= %s\n" % (varname, self._num_to_string(lb)))
            else:
                out.write(" %s <= %s <= %s\n" % (self._num_to_string(lb), varname, self._num_to_string(ub)))

        for block_name, block_code in (("Binaries", 'B'), ("Generals", 'I')):
            block = [varname for c, varname in zip(columns, varnames) if c[3] == block_code]
            if block:
                out.write("\n%s\n" % block_name)
                out.write(" " + " ".join(block) + "\n")
        out.write("End\n")
