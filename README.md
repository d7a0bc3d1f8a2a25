# kubeboard

kubeboard reads the deployments of one Kubernetes namespace, works out how
they relate to the cluster's pods, services and ingresses, and renders the
result as HTML fragments or as a Mermaid graph.

For each deployment it finds:

- the pods whose labels match the deployment's `matchLabels` selector
- the first service whose own selector is satisfied by the deployment's selector
- an ingress with an HTTP path whose backend is that service

## Installing

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Connecting to a cluster

`kubeboard.cluster` talks to the API server over its REST interface.

- `load_kubeconfig(path=None, context=None)` reads a kubeconfig file
  (`$KUBECONFIG`, or `~/.kube/config`, when no path is given) and returns a
  `ClusterConfig` for the given context, or the file's current context.
  Inline base64 certificate and key data are written to temporary files that
  are removed when the process exits.
- `in_cluster_config()` uses the service account mounted into a pod.
- `default_config()` tries the in-cluster settings first and falls back to the
  kubeconfig file.

`KubeClient(config, namespace="default")` offers `list_deployments()`,
`list_services()`, `list_ingresses()`, `list_pods(label_selector=None)` and
`get_deployment(name)`. Each returns the API objects as plain dictionaries.
Failures raise `KubeError`. A missing object raises `NotFoundError`, which is a
subclass of `KubeError`.

## Rendering

```python
from kubeboard.cluster import KubeClient, default_config
from kubeboard.overview import render_overview, render_deployment_json
from kubeboard.graph import deployment_graph

client = KubeClient(default_config(), "default")
objects = (
    client.list_deployments(),
    client.list_services(),
    client.list_ingresses(),
    client.list_pods(None),
)
table_html = render_overview(*objects)
json_html = render_deployment_json(*objects)
print(deployment_graph(client, "web"))
```

- `render_overview(...)` returns an HTML table with one row per deployment.
  Each row holds the deployment name, the number of matching pods, the service,
  the ingress and the namespace. Cell text is HTML-escaped.
- `render_deployment_json(...)` returns a `<pre>` block containing each
  deployment together with its pods, service and ingress as indented JSON.
  When several ingresses route to the service, the last one is shown.
- `kubeboard.graph.deployment_graph(client, name)` fetches one deployment and
  the objects around it, and returns Mermaid `graph TD` text
  (Ingress → Service → Deployment → Pods). If the deployment does not exist it
  raises `NotFoundError`. If listing pods, services or ingresses fails, those
  objects are left out of the graph.
- `kubeboard.graph.build_graph(deployment, pods, service=None, ingress=None, indent="")`
  builds the same text from objects you already hold.

`kubeboard.overview.find_service(selector, services)` and
`kubeboard.overview.find_ingress(service_name, ingresses)` expose the matching
rules on their own.

## Label helpers

- `kubeboard.labels.match_labels(selector, labels)` reports whether every
  key/value pair of the selector is present in the labels. A missing label
  counts as the empty string, so an empty selector matches anything.
- `kubeboard.labels.format_label_selector(match_labels)` renders a label map
  as `key=value,...` with the keys sorted. An empty map renders as `<none>`.

## What it does not do

kubeboard is a library only. It has no command and no web server. The HTML
fragments and Mermaid text it produces are for you to place in your own pages.
It only reads from the cluster and never changes anything there.