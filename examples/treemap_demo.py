#!/usr/bin/env python3
"""
Demonstration of Voronoi map fitting and nested treemaps.

1. Fits a flat Voronoi map and prints target vs. fitted areas
2. Lays out a two-level hierarchy as a Voronoi treemap
"""

from py_voronoi_map import configure_logging, fit, voronoi_treemap


def main():
    configure_logging("INFO")
    clip = [(0, 0), (400, 0), (400, 300), (0, 300)]

    print("=== Voronoi Map Demo ===\n")

    # 1. Flat map
    items = [{"name": name, "weight": weight}
             for name, weight in [("a", 5), ("b", 12), ("c", 3), ("d", 30), ("e", 0)]]
    result = fit(items, clip, seed="demo", max_iteration_count=100)

    print(f"1. Iterations: {result.iteration_count}, "
          f"convergence ratio: {result.convergence_ratio:.4f}, converged: {result.converged}")
    for cell in result.cells:
        site = cell.site
        print(f"   - {site.item['name']}: target {site.targeted_area:9.1f}  "
              f"fitted {cell.area:9.1f}")

    # 2. Treemap
    hierarchy = {
        "name": "root",
        "children": [
            {"name": "fruit", "children": [
                {"name": "apple", "weight": 20},
                {"name": "pear", "weight": 8},
                {"name": "plum", "weight": 4},
            ]},
            {"name": "vegetables", "children": [
                {"name": "kale", "weight": 10},
                {"name": "leek", "weight": 6},
            ]},
            {"name": "bread", "weight": 12},
        ],
    }
    tree = voronoi_treemap(hierarchy, clip, seed="demo", max_iteration_count=100)

    print("\n2. Treemap leaves:")
    for node in tree.leaves():
        print(f"   - {'  ' * node.depth}{node.item['name']}: value {node.value:g}, "
              f"{len(node.polygon)} vertices")


if __name__ == "__main__":
    main()
