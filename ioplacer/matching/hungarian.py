"""Hungarian algorithm (Kuhn-Munkres) for rectangular assignment problems.

Pure numeric primitive: takes an ``r x c`` integer cost matrix and returns
a minimum-cost maximum-cardinality matching. It has no notion of slots,
pins or feasibility; an infeasible cell is simply a very large cost.
"""

from typing import List


# Row has no column (only possible when there are fewer columns than rows)
UNASSIGNED = -1


class HungarianSolver:
    """Minimum-cost bipartite matching via row potentials and augmenting paths.

    Runs in O(r * c * max(r, c)). When there are more rows than columns the
    matrix is transposed internally so the augmenting phase always runs over
    the smaller side.
    """

    def solve(self, cost_matrix: List[List[int]]) -> List[int]:
        """
        Solve the assignment problem.

        Args:
            cost_matrix: r x c matrix, cost_matrix[i][j] = cost of row i -> column j

        Returns:
            Assignment where assignment[i] = j means row i is matched to column j,
            or UNASSIGNED if row i received no column

        Raises:
            ValueError: If the matrix is ragged
        """
        rows = len(cost_matrix)
        if rows == 0:
            return []
        cols = len(cost_matrix[0])
        for row in cost_matrix:
            if len(row) != cols:
                raise ValueError("Cost matrix rows must all have the same length")
        if cols == 0:
            return [UNASSIGNED] * rows

        if rows <= cols:
            return self._solve_wide(cost_matrix, rows, cols)

        # Transpose so rows <= cols, then invert the matching
        transposed = [[cost_matrix[i][j] for i in range(rows)] for j in range(cols)]
        col_to_row = self._solve_wide(transposed, cols, rows)
        assignment = [UNASSIGNED] * rows
        for j, i in enumerate(col_to_row):
            assignment[i] = j
        return assignment

    def _solve_wide(self, cost: List[List[int]], n: int, m: int) -> List[int]:
        """Match every one of n rows to a distinct column out of m >= n."""
        inf = float('inf')

        # 1-based potentials; index 0 is the virtual root of each augmenting tree
        u = [0] * (n + 1)      # Row labels
        v = [0] * (m + 1)      # Column labels
        match = [0] * (m + 1)  # match[j] = row matched to column j (0 = free)
        way = [0] * (m + 1)    # way[j] = previous column on the alternating path

        for i in range(1, n + 1):
            match[0] = i
            cur_col = 0
            mins = [inf] * (m + 1)  # mins[j] = minimum slack for column j
            visited = [False] * (m + 1)

            while True:
                visited[cur_col] = True
                cur_row = match[cur_col]
                delta = inf
                next_col = 0

                # Update slack from the newly reached row and find the tightest column
                for j in range(1, m + 1):
                    if visited[j]:
                        continue
                    slack = cost[cur_row - 1][j - 1] - u[cur_row] - v[j]
                    if slack < mins[j]:
                        mins[j] = slack
                        way[j] = cur_col
                    if mins[j] < delta:
                        delta = mins[j]
                        next_col = j

                # Update labels
                for j in range(m + 1):
                    if visited[j]:
                        u[match[j]] += delta
                        v[j] -= delta
                    else:
                        mins[j] -= delta

                cur_col = next_col
                if match[cur_col] == 0:
                    break

            # Flip the augmenting path
            while cur_col:
                prev_col = way[cur_col]
                match[cur_col] = match[prev_col]
                cur_col = prev_col

        assignment = [UNASSIGNED] * n
        for j in range(1, m + 1):
            if match[j]:
                assignment[match[j] - 1] = j - 1
        return assignment


def total_cost(cost_matrix: List[List[int]], assignment: List[int]) -> int:
    """Sum of the matched cells."""
    return sum(
        cost_matrix[row][col]
        for row, col in enumerate(assignment)
        if col != UNASSIGNED
    )
