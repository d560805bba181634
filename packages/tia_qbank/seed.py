"""
Starter question set covering every domain.
"""
from typing import List

from packages.tia_adaptive.difficulty import Difficulty
from packages.tia_adaptive.domains import Domain
from .domain import Question
from .repository_interface import QuestionRepository

_SEED = [
    # Data Structures
    {
        "question_id": "DS001",
        "question_text": "Explain the difference between a stack and a queue. When would you use each?",
        "domain": "data_structures",
        "difficulty": "easy",
        "expected_key_points": [
            "Stack follows LIFO (Last In, First Out) principle",
            "Queue follows FIFO (First In, First Out) principle",
            "Stack operations: push, pop, peek",
            "Queue operations: enqueue, dequeue, front",
            "Stack use cases: function calls, undo operations, expression evaluation",
            "Queue use cases: task scheduling, breadth-first search, buffering",
        ],
        "sample_answer": "A stack is a linear data structure that follows LIFO principle where elements are added and removed from the same end (top). A queue follows FIFO principle where elements are added at the rear and removed from the front.",
        "tags": ["stack", "queue", "lifo", "fifo", "data-structures"],
    },
    {
        "question_id": "DS002",
        "question_text": "How would you implement a hash table? What are the key considerations?",
        "domain": "data_structures",
        "difficulty": "medium",
        "expected_key_points": [
            "Hash function design and distribution",
            "Collision handling strategies (chaining, open addressing)",
            "Load factor and resizing considerations",
            "Time complexity: O(1) average, O(n) worst case",
            "Space complexity considerations",
            "Hash function properties: deterministic, uniform distribution",
        ],
        "sample_answer": "A hash table uses a hash function to map keys to array indices. Key considerations include uniform distribution, collision handling through chaining or open addressing, and resizing based on load factor.",
        "tags": ["hash-table", "hash-function", "collision", "load-factor"],
    },
    {
        "question_id": "DS003",
        "question_text": "Design a data structure that supports insert, delete, and getRandom operations in O(1) time.",
        "domain": "data_structures",
        "difficulty": "hard",
        "expected_key_points": [
            "Combination of array and hash map",
            "Array for O(1) random access",
            "Hash map for O(1) lookup and deletion",
            "Maintaining indices during deletion",
            "Swapping with last element for deletion",
            "Handling edge cases and duplicates",
        ],
        "sample_answer": "Use a dynamic array together with a hash map from element to index. Delete by swapping with the last element and updating the map.",
        "tags": ["randomized-set", "hash-map", "array", "o1-operations"],
    },
    # Algorithms
    {
        "question_id": "ALG001",
        "question_text": "Explain the difference between BFS and DFS. When would you use each?",
        "domain": "algorithms",
        "difficulty": "easy",
        "expected_key_points": [
            "BFS uses queue, DFS uses stack (or recursion)",
            "BFS explores level by level, DFS goes deep first",
            "BFS finds shortest path in unweighted graphs",
            "DFS uses less memory, BFS uses more memory",
            "BFS is better for finding shortest paths",
            "DFS is better for topological sorting, cycle detection",
        ],
        "sample_answer": "BFS explores nodes level by level using a queue, while DFS follows each branch as deep as possible before backtracking.",
        "tags": ["bfs", "dfs", "graph-traversal", "shortest-path"],
    },
    {
        "question_id": "ALG002",
        "question_text": "How would you find the longest common subsequence between two strings?",
        "domain": "algorithms",
        "difficulty": "medium",
        "expected_key_points": [
            "Dynamic programming approach",
            "2D table to store subproblem results",
            "Recurrence relation: LCS(i,j) = LCS(i-1,j-1)+1 if chars match, else max(LCS(i-1,j), LCS(i,j-1))",
            "Time complexity: O(m*n)",
            "Space complexity: O(m*n) or O(min(m,n)) with optimization",
            "Backtracking to reconstruct the actual LCS",
        ],
        "sample_answer": "Use dynamic programming with a 2D table where dp[i][j] is the LCS length of the two prefixes, then backtrack to recover the subsequence.",
        "tags": ["lcs", "dynamic-programming", "string-algorithms", "subsequence"],
    },
    {
        "question_id": "ALG003",
        "question_text": "Design an algorithm to find the kth largest element in an unsorted array.",
        "domain": "algorithms",
        "difficulty": "medium",
        "expected_key_points": [
            "Quickselect algorithm (modified quicksort)",
            "Heap-based approach (min-heap of size k)",
            "Sorting approach (O(n log n))",
            "Average case O(n), worst case O(n^2) for quickselect",
            "O(n log k) for heap approach",
            "Partitioning strategy and pivot selection",
        ],
        "sample_answer": "Use quickselect, partitioning around a pivot and recursing into one side, or keep a min-heap of size k.",
        "tags": ["quickselect", "heap", "kth-largest", "partitioning"],
    },
    # System Design
    {
        "question_id": "SD001",
        "question_text": "How would you design a URL shortener like bit.ly?",
        "domain": "system_design",
        "difficulty": "medium",
        "expected_key_points": [
            "Hash function to generate short URLs",
            "Database design for URL storage",
            "Handling collisions and custom URLs",
            "Caching strategy (Redis)",
            "Analytics and tracking",
            "Scalability considerations (sharding, load balancing)",
        ],
        "sample_answer": "Generate short codes with a hash function, store mappings in a database behind a cache, and scale horizontally with sharding.",
        "tags": ["url-shortener", "hash-function", "caching", "scalability"],
    },
    {
        "question_id": "SD002",
        "question_text": "Design a distributed cache system. How would you handle cache invalidation?",
        "domain": "system_design",
        "difficulty": "hard",
        "expected_key_points": [
            "Consistent hashing for distribution",
            "Cache eviction policies (LRU, LFU, TTL)",
            "Cache invalidation strategies (write-through, write-behind)",
            "Handling cache misses and cold starts",
            "Replication and consistency models",
            "Monitoring and metrics",
        ],
        "sample_answer": "Distribute keys with consistent hashing, invalidate with write-through or write-behind, evict with LRU plus TTL, and replicate for availability.",
        "tags": ["distributed-cache", "consistent-hashing", "cache-invalidation", "eviction"],
    },
    # Database
    {
        "question_id": "DB001",
        "question_text": "Explain the differences between SQL and NoSQL databases. When would you choose each?",
        "domain": "database",
        "difficulty": "easy",
        "expected_key_points": [
            "SQL: ACID properties, structured schema, relational model",
            "NoSQL: flexible schema, horizontal scaling, various data models",
            "SQL: complex queries, transactions, consistency",
            "NoSQL: high performance, scalability, flexibility",
            "Use SQL for complex relationships and transactions",
            "Use NoSQL for high-scale, flexible data requirements",
        ],
        "sample_answer": "SQL databases give ACID transactions and structured schemas; NoSQL stores trade some of that for flexible schemas and horizontal scaling.",
        "tags": ["sql", "nosql", "acid", "scalability", "consistency"],
    },
    {
        "question_id": "DB002",
        "question_text": "How would you optimize a slow database query?",
        "domain": "database",
        "difficulty": "medium",
        "expected_key_points": [
            "Query analysis and profiling",
            "Index optimization (covering indexes, composite indexes)",
            "Query rewriting and optimization",
            "Database statistics and query planner",
            "Partitioning and sharding strategies",
            "Caching and materialized views",
        ],
        "sample_answer": "Read the execution plan, add suitable indexes, rewrite the query, refresh statistics, and consider partitioning or caching.",
        "tags": ["query-optimization", "indexing", "profiling", "performance"],
    },
    # Networking
    {
        "question_id": "NET001",
        "question_text": "Explain the difference between TCP and UDP. When would you use each?",
        "domain": "networking",
        "difficulty": "easy",
        "expected_key_points": [
            "TCP: connection-oriented, reliable, ordered delivery",
            "UDP: connectionless, unreliable, no ordering guarantees",
            "TCP: higher overhead, flow control, congestion control",
            "UDP: lower overhead, faster, no flow control",
            "Use TCP for reliable data transfer (HTTP, FTP)",
            "Use UDP for real-time applications (video, gaming)",
        ],
        "sample_answer": "TCP gives reliable ordered delivery over a connection; UDP is connectionless and lighter, suiting real-time traffic.",
        "tags": ["tcp", "udp", "reliability", "performance", "protocols"],
    },
    # Security
    {
        "question_id": "SEC001",
        "question_text": "What are the main types of SQL injection attacks and how can you prevent them?",
        "domain": "security",
        "difficulty": "medium",
        "expected_key_points": [
            "Union-based, Boolean-based, Time-based SQL injection",
            "Input validation and sanitization",
            "Parameterized queries and prepared statements",
            "Least privilege principle for database access",
            "Web Application Firewall (WAF)",
            "Regular security testing and code reviews",
        ],
        "sample_answer": "Injection comes in union, boolean and time-based forms. Prevent it with parameterized queries, input validation and least-privilege database accounts.",
        "tags": ["sql-injection", "security", "prepared-statements", "validation"],
    },
]


def build_seed_questions() -> List[Question]:
    return [
        Question(
            question_id=item["question_id"],
            question_text=item["question_text"],
            domain=Domain(item["domain"]),
            difficulty=Difficulty(item["difficulty"]),
            expected_key_points=list(item["expected_key_points"]),
            sample_answer=item["sample_answer"],
            tags=list(item["tags"]),
        )
        for item in _SEED
    ]


def seed_repository(repository: QuestionRepository) -> int:
    """Save every seed question into repository. Returns the number saved."""
    questions = build_seed_questions()
    for question in questions:
        repository.save(question)
    return len(questions)
